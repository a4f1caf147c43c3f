"""
Prompts for the resume AI routes
Each prompt asks for a single JSON object; literal braces are doubled for str.format.
"""

ANALYSIS_PROMPT = """
Analyze this resume and provide personalized feedback. Be specific and actionable based on the actual content provided.

Resume Content:
{resume_text}

Please analyze and return a JSON response with the following structure:
{{
  "score": number (0-100),
  "issues": [
    {{
      "id": "unique-id",
      "type": "error" | "warning" | "info",
      "title": "Issue Title",
      "description": "Specific description based on the resume content",
      "severity": "critical" | "high" | "medium" | "low",
      "suggestion": "Specific actionable suggestion"
    }}
  ],
  "strengths": [
    "List of specific strengths found in this resume"
  ],
  "suggestions": [
    {{
      "id": "unique-id",
      "title": "Suggestion Title",
      "description": "Specific suggestion based on resume analysis",
      "impact": "high" | "medium" | "low",
      "category": "Content" | "Structure" | "Keywords" | "Experience" | "Skills"
    }}
  ],
  "atsCompatibility": number (0-100),
  "readabilityScore": number (0-100),
  "completenessScore": number (0-100)
}}

Analysis Guidelines:
1. Check if professional summary exists and is compelling (2-3 sentences that highlight key value proposition)
2. Look for quantified achievements (numbers, percentages, metrics) in work experience
3. Assess if skills are relevant and properly categorized
4. Check for appropriate work experience descriptions
5. Evaluate education section completeness
6. Look for gaps or missing sections
7. Assess overall structure and formatting
8. Check for industry-specific keywords
9. Evaluate length and conciseness
10. Look for consistency in formatting and dates

Be specific about what's actually missing or weak in THIS resume, not generic advice. If the resume already has good quantified achievements, don't suggest adding them. If it has a good summary, praise it instead of suggesting to add one.
"""

ENHANCEMENT_FOCUS = {
    "comprehensive": "Cover every section: summary, experience, skills, keywords and missing sections.",
    "skills": "Concentrate on the skills section: missing in-demand skills, grouping and naming.",
    "summary": "Concentrate on the professional summary: value proposition, action words, seniority.",
    "experience": "Concentrate on experience descriptions: quantified achievements and impact statements.",
    "keywords": "Concentrate on ATS keywords the candidate is missing for their apparent target roles.",
}

ENHANCEMENT_PROMPT = """You are an elite resume optimization expert with 15+ years of experience helping professionals land top-tier positions. Analyze this resume and provide SPECIFIC, ACTIONABLE improvements.

CURRENT RESUME:
{resume_text}

ENHANCEMENT FOCUS:
{focus}

ANALYSIS REQUIREMENTS:
1. Provide specific, professional improvements that can be directly applied
2. Focus on current job market trends and ATS optimization
3. Suggest quantifiable achievements where possible
4. Enhance action words and impact statements
5. Ensure all suggestions are relevant to the candidate's actual experience

Return a JSON response with this exact structure:
{{
  "suggestions": [
    {{
      "id": "unique_id",
      "type": "skill|summary|experience|keyword|section",
      "title": "Clear improvement title",
      "description": "Detailed explanation of why this improvement matters",
      "priority": "critical|high|medium|low",
      "confidence": 85,
      "impact": "Specific impact statement",
      "category": "Skills|Content|Experience|Keywords|Formatting",
      "before": "Current text (if applicable)",
      "after": "Improved version",
      "applicableData": {{
        "section": "which section to modify",
        "index": "index if array item",
        "field": "specific field to update",
        "value": "new value to apply"
      }}
    }}
  ]
}}

FOCUS AREAS:
- Professional summary enhancement with stronger action words
- Experience descriptions with quantified achievements
- Skills optimization for current market demands
- ATS-friendly keyword integration
- Professional formatting improvements
- Missing critical sections

Provide 6-10 high-impact suggestions that are immediately actionable."""

JOB_MATCH_PROMPT = """
You are a BRUTAL, no-nonsense hiring manager and technical recruiter with 20+ years of experience. Your job is to give harsh, honest feedback about job compatibility. Don't sugarcoat anything.

RESUME:
{resume_text}

JOB DESCRIPTION:
{job_description}

Analyze this resume against the job description and provide HARSH, HONEST feedback. Be brutally honest about their chances. If they're not qualified, say it directly. If they're missing critical skills, call it out harshly.

Return a JSON response with this EXACT structure:
{{
  "compatibilityScore": number (0-100, be harsh - average should be 30-50),
  "verdict": "REJECT" | "MAYBE" | "INTERVIEW" | "STRONG_MATCH",
  "harshFeedback": "Brutal, honest assessment in 2-3 sentences",
  "criticalGaps": [
    {{
      "category": "SKILLS" | "EXPERIENCE" | "EDUCATION" | "CERTIFICATIONS",
      "gap": "Specific missing requirement",
      "severity": "DEALBREAKER" | "CRITICAL" | "MAJOR" | "MINOR",
      "harshComment": "Brutal comment about this gap"
    }}
  ],
  "strengths": [
    {{
      "point": "What they actually have going for them",
      "relevance": "HIGH" | "MEDIUM" | "LOW"
    }}
  ],
  "redFlags": [
    "List of concerning things about this candidate"
  ],
  "improvements": [
    {{
      "action": "What they need to do",
      "timeframe": "How long it would take",
      "difficulty": "EASY" | "HARD" | "NEARLY_IMPOSSIBLE",
      "honestAssessment": "Brutal truth about whether they can actually do this"
    }}
  ],
  "competitionAnalysis": {{
    "candidateLevel": "BEGINNER" | "JUNIOR" | "MID" | "SENIOR" | "EXPERT",
    "jobLevel": "BEGINNER" | "JUNIOR" | "MID" | "SENIOR" | "EXPERT",
    "realityCheck": "Honest assessment of how they stack up against typical applicants"
  }},
  "salaryReality": {{
    "theirWorth": "What they're actually worth based on their resume",
    "jobExpectation": "What the job probably pays",
    "gap": "The brutal truth about salary expectations"
  }}
}}

SCORING GUIDELINES (be harsh):
- 0-20: Completely unqualified, wasting everyone's time
- 21-40: Major gaps, unlikely to succeed even with training
- 41-60: Some potential but significant concerns
- 61-80: Decent candidate with some reservations
- 81-100: Strong match (rare, only for truly excellent fits)

Don't be nice. Be honest. This person needs to know the truth about their chances.
"""

PDF_STRUCTURE_PROMPT = """Extract resume information from this text and return ONLY valid JSON:

{resume_text}

Return this exact structure:
{{
  "personalInfo": {{
    "fullName": "name_here",
    "email": "email_here",
    "phone": "phone_here",
    "location": "location_here",
    "summary": "summary_here"
  }},
  "workExperience": [
    {{
      "company": "company_name",
      "position": "job_title",
      "startDate": "YYYY-MM",
      "endDate": "YYYY-MM",
      "description": "job_description"
    }}
  ],
  "skills": ["skill1", "skill2"],
  "education": [
    {{
      "school": "school_name",
      "degree": "degree_type",
      "field": "field_of_study",
      "graduationDate": "YYYY-MM"
    }}
  ]
}}"""

UPLOAD_STRUCTURE_PROMPT = """You are an EXPERT resume parser. Your job is to extract and categorize resume information.

**SECTION IDENTIFICATION PATTERNS:**

**PERSONAL INFORMATION:**
- Name: first 3 lines, proper capitalization, 2-4 words
- Email: @ pattern
- Phone: (XXX) XXX-XXXX, XXX-XXX-XXXX, +X-XXX-XXX-XXXX patterns
- Location: City, State | City, Country | State, ZIP patterns
- LinkedIn: linkedin.com/in/[username]; GitHub: github.com/[username]
- Website: http/https domains excluding LinkedIn/GitHub
- Summary: paragraph after contact info that describes the career

**WORK EXPERIENCE:**
- "Software Engineer at Google" -> Position: Software Engineer, Company: Google
- "Google - Software Engineer" -> Company: Google, Position: Software Engineer
- "Senior Developer | Microsoft" -> Position: Senior Developer, Company: Microsoft
- Dates: "2020-2023", "Jan 2020 - Present", "2019 to 2022", "June 2021 - Current"
- Identify the current job from "Present", "Current", or recent dates
- Parse multi-line descriptions and bullets (•, -, *, numbers) as a single description

**SKILLS:** programming languages, frameworks, databases, cloud/devops and tools, taken from context as well as lists.

**EDUCATION:** "Bachelor of Science", "Master of Arts", "PhD in", "B.S.", "M.S.", "MBA"; institutions with "University", "College", "Institute", "School".

**OUTPUT REQUIREMENTS:**
Return ONLY valid JSON. No explanations, no markdown, just pure JSON:

{{
  "personalInfo": {{
    "fullName": "extracted_full_name",
    "email": "extracted_email",
    "phone": "extracted_phone",
    "location": "extracted_location",
    "linkedin": "extracted_linkedin_url",
    "website": "extracted_website_url",
    "summary": "extracted_summary_or_objective"
  }},
  "workExperience": [
    {{
      "id": "work_1",
      "company": "company_name",
      "position": "job_title",
      "startDate": "YYYY-MM",
      "endDate": "YYYY-MM or empty if current",
      "isCurrentJob": true_or_false,
      "description": "comprehensive_description_with_achievements"
    }}
  ],
  "education": [
    {{
      "id": "edu_1",
      "school": "institution_name",
      "degree": "degree_type",
      "field": "field_of_study",
      "graduationDate": "YYYY-MM"
    }}
  ],
  "skills": ["skill1", "skill2", "skill3"],
  "certifications": [
    {{
      "id": "cert_1",
      "name": "certification_name",
      "issuer": "issuing_organization",
      "dateObtained": "YYYY-MM"
    }}
  ],
  "projects": [
    {{
      "id": "proj_1",
      "name": "project_name",
      "description": "project_description",
      "technologies": ["tech1", "tech2"]
    }}
  ]
}}

**RESUME TEXT TO ANALYZE:**
{resume_text}"""

QUICK_ENHANCE_PROMPT = (
    "Improve this resume JSON. Return JSON with optional fields: "
    "{{personalInfo?:{{summary:string}}, skillsToAdd?: string[], "
    "experienceEnhancements?: Array<{{id:string, enhancement:string}}>}}. "
    "Resume: {resume_json}"
)
