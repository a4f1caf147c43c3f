"""
PDF Generator for Resumes
Renders Resume Data into a one-column PDF styled by the selected template
"""
import io
import logging
import re
from pathlib import Path
from typing import BinaryIO, List, Optional, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer

from resume_builder_templates import (
    SECTION_TITLES,
    TemplateStyle,
    contact_items,
    format_range,
    get_template,
    group_skills,
    visible_sections,
)
from resume_model import ResumeData

logger = logging.getLogger("PDFGenerator")

BULLET_RE = re.compile(r"^[•\-\*▪►◦·]\s*")


def pdf_filename(resume: ResumeData) -> str:
    """Download name: full name with spaces as underscores, then the template."""
    name = re.sub(r"\s+", "_", (resume.personalInfo.fullName or "").strip()) or "Resume"
    return f"{name}_{resume.selectedTemplate}.pdf"


def _p(text: str) -> str:
    """Escape text for reportlab's paragraph markup."""
    return escape(text or "")


class PDFGenerator:
    """Generate resume PDFs for one template"""

    def __init__(self, template: Union[str, TemplateStyle, None] = None):
        self.template = template if isinstance(template, TemplateStyle) else get_template(template)
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Paragraph styles derived from the template's colours and fonts"""
        accent = colors.HexColor(self.template.accent)
        align = TA_CENTER if self.template.header_align == "center" else TA_LEFT
        body_font = self.template.body_font
        bold_font = "Times-Bold" if body_font.startswith("Times") else "Helvetica-Bold"
        italic_font = "Times-Italic" if body_font.startswith("Times") else "Helvetica-Oblique"

        # Name
        self.styles.add(ParagraphStyle(
            name='CustomHeader',
            parent=self.styles['Heading1'],
            fontSize=20,
            leading=24,
            textColor=accent,
            spaceAfter=2,
            alignment=align,
            fontName=self.template.heading_font
        ))

        # Professional title under the name
        self.styles.add(ParagraphStyle(
            name='HeaderTitle',
            parent=self.styles['Normal'],
            fontSize=11,
            textColor=colors.HexColor('#4b5563'),
            alignment=align,
            fontName=body_font,
            spaceAfter=2
        ))

        self.styles.add(ParagraphStyle(
            name='ContactInfo',
            parent=self.styles['Normal'],
            fontSize=9,
            textColor=colors.HexColor('#34495e'),
            alignment=align,
            fontName=body_font,
            spaceAfter=6
        ))

        # Section heading
        self.styles.add(ParagraphStyle(
            name='CustomSubHeader',
            parent=self.styles['Heading2'],
            fontSize=12,
            textColor=accent,
            spaceBefore=8,
            spaceAfter=2,
            fontName=self.template.heading_font
        ))

        self.styles.add(ParagraphStyle(
            name='ResumeBody',
            parent=self.styles['Normal'],
            fontSize=9.5,
            leading=12,
            textColor=colors.HexColor('#1f2937'),
            fontName=body_font,
            spaceAfter=3
        ))

        self.styles.add(ParagraphStyle(
            name='BulletPoint',
            parent=self.styles['ResumeBody'],
            leftIndent=16,
            bulletIndent=6,
            spaceAfter=2
        ))

        self.styles.add(ParagraphStyle(
            name='CompanyPosition',
            parent=self.styles['ResumeBody'],
            fontSize=10,
            spaceBefore=4,
            spaceAfter=1,
            fontName=bold_font
        ))

        self.styles.add(ParagraphStyle(
            name='DateLocation',
            parent=self.styles['ResumeBody'],
            fontSize=8.5,
            textColor=colors.HexColor('#6b7280'),
            fontName=italic_font
        ))

    def _heading(self, section: str) -> list:
        title = SECTION_TITLES[section]
        if self.template.uppercase_headings:
            title = title.upper()
        return [
            Paragraph(_p(title), self.styles['CustomSubHeader']),
            HRFlowable(width="100%", thickness=0.8, color=colors.HexColor(self.template.accent), spaceAfter=4),
        ]

    def _description(self, text: str) -> list:
        flow = []
        for line in (text or "").splitlines():
            line = line.strip()
            if not line:
                continue
            if BULLET_RE.match(line):
                flow.append(Paragraph(_p(BULLET_RE.sub("", line)), self.styles['BulletPoint'], bulletText='•'))
            else:
                flow.append(Paragraph(_p(line), self.styles['ResumeBody']))
        return flow

    def _header(self, resume: ResumeData) -> list:
        info = resume.personalInfo
        story = [Paragraph(_p(info.fullName or "Resume"), self.styles['CustomHeader'])]
        if info.title:
            story.append(Paragraph(_p(info.title), self.styles['HeaderTitle']))
        contacts = contact_items(resume)
        if contacts:
            story.append(Paragraph(" | ".join(_p(c) for c in contacts), self.styles['ContactInfo']))
        return story

    def _section(self, resume: ResumeData, section: str) -> list:
        story = self._heading(section)

        if section == "summary":
            story.append(Paragraph(_p(resume.personalInfo.summary), self.styles['ResumeBody']))

        elif section == "workExperience":
            for job in resume.workExperience:
                head = f"<b>{_p(job.position)}</b>"
                if job.company:
                    head += f" - {_p(job.company)}"
                story.append(Paragraph(head, self.styles['CompanyPosition']))
                meta = " | ".join(p for p in (format_range(job.startDate, job.endDate, job.current), job.location) if p)
                if meta:
                    story.append(Paragraph(_p(meta), self.styles['DateLocation']))
                story.extend(self._description(job.description))

        elif section == "education":
            for edu in resume.education:
                degree = edu.degree + (f" in {edu.field}" if edu.field else "")
                story.append(Paragraph(_p(degree or edu.institution), self.styles['CompanyPosition']))
                when = edu.graduationDate or format_range(edu.startDate, edu.endDate, edu.current)
                meta = " | ".join(p for p in (edu.institution if degree else "", when, f"GPA {edu.gpa}" if edu.gpa else "") if p)
                if meta:
                    story.append(Paragraph(_p(meta), self.styles['DateLocation']))

        elif section == "skills":
            mode = self.template.skill_mode
            if mode == "grouped":
                for category, names in group_skills(resume).items():
                    story.append(Paragraph(f"<b>{_p(category)}:</b> {_p(', '.join(names))}", self.styles['ResumeBody']))
            elif mode == "levels":
                for skill in resume.skills:
                    story.append(Paragraph(
                        f"{_p(skill.name)} <font color='#6b7280'>({_p(skill.level)})</font>",
                        self.styles['BulletPoint'],
                        bulletText='•',
                    ))
            else:
                separator = "  •  " if mode == "tags" else ", "
                story.append(Paragraph(_p(separator.join(s.name for s in resume.skills)), self.styles['ResumeBody']))

        elif section == "projects":
            for project in resume.projects:
                head = f"<b>{_p(project.title)}</b>"
                if project.link:
                    head += f" - {_p(project.link)}"
                story.append(Paragraph(head, self.styles['CompanyPosition']))
                story.extend(self._description(project.description))
                if project.technologies:
                    story.append(Paragraph(_p(", ".join(project.technologies)), self.styles['DateLocation']))

        elif section == "certifications":
            for cert in resume.certifications:
                line = " - ".join(p for p in (cert.name, cert.issuer, cert.date) if p)
                story.append(Paragraph(_p(line), self.styles['BulletPoint'], bulletText='•'))

        elif section == "languages":
            langs = ", ".join(f"{lang.name} ({lang.proficiency})" for lang in resume.languages if lang.name)
            story.append(Paragraph(_p(langs), self.styles['ResumeBody']))

        elif section == "customSections":
            for custom in resume.customSections:
                if custom.title:
                    story.append(Paragraph(_p(custom.title), self.styles['CompanyPosition']))
                story.extend(self._description(custom.content))

        story.append(Spacer(1, 0.05 * inch))
        return story

    def build_story(self, resume: ResumeData) -> List:
        story = self._header(resume)
        for section in visible_sections(resume, self.template):
            story.extend(self._section(resume, section))
        return story

    def generate_resume_pdf(self, resume: ResumeData, output: Union[str, Path, BinaryIO]) -> bool:
        """
        Generate a resume PDF

        Args:
            resume: Resume Data to render
            output: Path to save the PDF, or a binary buffer to write into

        Returns:
            bool: True if successful, False otherwise
        """
        try:
            if isinstance(output, (str, Path)):
                Path(output).parent.mkdir(parents=True, exist_ok=True)
                output = str(output)

            doc = SimpleDocTemplate(
                output,
                pagesize=letter,
                rightMargin=0.75*inch,
                leftMargin=0.75*inch,
                topMargin=0.75*inch,
                bottomMargin=0.75*inch,
                title=f"{resume.personalInfo.fullName or 'Resume'} - {self.template.label}",
                author=resume.personalInfo.fullName,
            )
            doc.build(self.build_story(resume))
            logger.info(f"Resume PDF generated with the {self.template.name} template")
            return True

        except Exception:
            logger.exception("Error generating resume PDF")
            return False


# Convenience functions
def generate_resume_pdf(resume: ResumeData, output_path: Union[str, Path], template: Optional[str] = None) -> bool:
    """Generate a resume PDF in the resume's selected template unless one is given"""
    generator = PDFGenerator(template or resume.selectedTemplate)
    return generator.generate_resume_pdf(resume, output_path)


def render_pdf_bytes(resume: ResumeData, template: Optional[str] = None) -> Optional[bytes]:
    buffer = io.BytesIO()
    if not PDFGenerator(template or resume.selectedTemplate).generate_resume_pdf(resume, buffer):
        return None
    return buffer.getvalue()
