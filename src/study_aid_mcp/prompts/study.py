"""Study analysis and quiz prompt templates.

Each template ends with the literal JSON shape Gemini is asked to fill in.
Braces that belong to the JSON shape are doubled for ``str.format``.
"""

from __future__ import annotations

LANGUAGE_INSTRUCTIONS = {
    "english": "Please provide all responses in English language.",
    "tamil": "Please provide all responses in Tamil language.",
}

TAMIL_SCRIPT_SUFFIX = " Use Tamil script for all content."

QUESTION_LANGUAGE_INSTRUCTIONS = {
    "english": "Please provide all questions and answers in English language.",
    "tamil": "Please provide all questions and answers in Tamil language.",
}

FACTUAL_RULES = """\
CRITICAL INSTRUCTIONS:
- Extract ONLY specific, factual, and concrete information directly from the content
- DO NOT include generic statements about importance or what needs to be studied
- Focus on actual facts: names, dates, events, definitions, processes, figures, laws, etc.
- Provide practical memory tips for each study point to help with retention"""

_FULL_ANALYSIS_SHAPE = """\
{{
  "mainTopic": "Main topic of the content",
  "studyPoints": [
    {{
      "title": "Key point title",
      "description": "Detailed description",
      "importance": "high/medium/low",
      "tnpscRelevance": "TNPSC relevance explanation",
      "tnpscPriority": "high/medium/low",
      "memoryTip": "Easy memory tip for students"
    }}
  ],
  "keyPoints": ["Specific factual point 1", "Specific factual point 2"],
  "summary": "Overall summary of the content",
  "tnpscRelevance": "How this content is relevant for TNPSC exams",
  "tnpscCategories": ["Category1", "Category2"],
  "difficulty": "easy/medium/hard"
}}"""

_FULL_ANALYSIS_FOCUS = """\
Focus on:
- TNPSC Group 1, 2, 4 exam relevance
- Extracting specific facts, figures, names, dates, and definitions
- Important dates, names, places
- Conceptual understanding
- Application in exam context
- Make key points factual and specific from the actual content
- Provide creative memory tips using mnemonics, associations, or patterns"""

IMAGE_ANALYSIS = (
    """\
Analyze this image for TNPSC (Tamil Nadu Public Service Commission) exam preparation.

{language_instruction}

"""
    + FACTUAL_RULES
    + """

Please provide a comprehensive analysis in the following JSON format:
"""
    + _FULL_ANALYSIS_SHAPE
    + "\n\n"
    + _FULL_ANALYSIS_FOCUS
)

DOCUMENT_ANALYSIS = (
    """\
Analyze this PDF text content for TNPSC (Tamil Nadu Public Service Commission) exam preparation.

{language_instruction}

Content: {content}

"""
    + FACTUAL_RULES
    + """

Please provide a comprehensive analysis in the following JSON format:
"""
    + _FULL_ANALYSIS_SHAPE
    + "\n\n"
    + _FULL_ANALYSIS_FOCUS
)

PAGE_PREVIEW = """\
Analyze this PDF page content for TNPSC exam preparation:

{language_instruction}

Content: {content}

Please provide analysis in JSON format:
{{
  "keyPoints": ["Specific factual point 1", "Specific factual point 2"],
  "summary": "Brief summary of the page content",
  "importance": "high/medium/low",
  "tnpscRelevance": "How this content relates to TNPSC exams"
}}

Focus on:
- TNPSC exam relevance
- Extracting specific facts, names, dates, and concrete information
- Key information for study
- Make key points factual and specific from the actual content"""

PAGE_ANALYSIS = (
    """\
Analyze this PDF page content for TNPSC exam preparation:

{language_instruction}

Page {page_number} Content: {content}

"""
    + FACTUAL_RULES
    + """

Please provide analysis in JSON format:
{{
  "keyPoints": ["Short crisp key point 1", "Short crisp key point 2", "Short crisp key point 3", \
"Short crisp key point 4", "Short crisp key point 5"],
  "studyPoints": [
    {{
      "title": "Study point title",
      "description": "Detailed description",
      "importance": "high/medium/low",
      "tnpscRelevance": "TNPSC relevance explanation"
    }}
  ],
  "summary": "Brief summary of the page content",
  "tnpscRelevance": "How this content relates to TNPSC exams",
  "tnpscCategories": ["Category1", "Category2"]
}}

Focus on:
- Extract at least 5 short crisp key points per page for easy memorization
- TNPSC exam relevance
- Important facts and concepts
- Key information for study"""
)

PAGE_DETAIL = """\
Analyze this individual PDF page content for TNPSC exam preparation:

{language_instruction}

Page {page_number} Content: {content}

Please provide detailed analysis in JSON format:
{{
  "keyPoints": ["Specific factual point 1", "Specific factual point 2", "Specific factual point 3", \
"Specific factual point 4", "Specific factual point 5", "Specific factual point 6", \
"Specific factual point 7", "Specific factual point 8"],
  "studyPoints": [
    {{
      "title": "Study point title",
      "description": "Detailed description",
      "importance": "high/medium/low",
      "tnpscRelevance": "TNPSC relevance explanation",
      "memoryTip": "Easy memory tip for students"
    }}
  ],
  "summary": "Brief summary of the page content",
  "tnpscRelevance": "How this content relates to TNPSC exams"
}}

Focus on:
- Extract at least 8 specific factual key points per page from the actual content
- Detailed study points with TNPSC relevance
- Specific facts, names, dates, and concrete information
- Definitions and explanations
- Statistical data and figures
- Historical context and significance
- Provide creative memory tips using mnemonics, associations, or patterns"""

ANALYSIS_BLOCK = """\
Analysis {index}:
Key Points: {key_points}
Summary: {summary}
TNPSC Relevance: {tnpsc_relevance}
"""

QUESTION_GENERATION = """\
Based on the following TNPSC study content, generate {count} comprehensive questions:

Content Analysis:
{analyses}

Difficulty Level: {difficulty}
{language_instruction}

CRITICAL INSTRUCTIONS:
- Generate questions ONLY from the specific facts and information provided in the key points and summary above
- DO NOT create questions about the importance of content or general study advice
- Focus on testing factual knowledge, specific details, and understanding of the provided content
- Questions should test recall of names, dates, events, definitions, and concepts mentioned in the material

Generate ONLY these types of questions:
- Multiple choice questions (4 options each) - 70%
- Assertion-Reason questions - 30%

For MCQ questions, provide 4 clear options (A, B, C, D).
IMPORTANT: The "answer" field should contain ONLY the option letter (A, B, C, or D), not the full option text.

For Assertion-Reason questions, provide:
- Assertion statement
- Reason statement
- 4 options: (A) Both assertion and reason are true and reason is correct explanation \
(B) Both assertion and reason are true but reason is not correct explanation \
(C) Assertion is true but reason is false (D) Both assertion and reason are false

Return as a JSON array:
[
  {{
    "question": "Question text here",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "answer": "A",
    "type": "mcq" | "assertion_reason",
    "difficulty": "{difficulty}",
    "tnpscGroup": "Group 1" | "Group 2" | "Group 4",
    "explanation": "Brief explanation of the answer"
  }}
]

CRITICAL: Make sure the "answer" field contains only the letter (A, B, C, or D) that corresponds to the correct option."""
