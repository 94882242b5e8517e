"""
Prompt templates for the study content pipeline
"""

# 공통 JSON 출력 주의사항
JSON_ONLY_WARNING = """Very Important: You must respond with only a single, valid JSON value that strictly follows the provided schema. Do not include any text, markdown, or explanations before or after the JSON. Double-check for common errors like trailing commas or missing commas between objects."""

PAGE_RANGE_SCHEMA = """[
  {{
    "title": "string",
    "startPage": number,
    "endPage": number
  }}
]"""

# 문서 구조 분석
DOCUMENT_STRUCTURE_PROMPT = """You are an intelligent assistant specializing in analyzing document structures. Your task is to examine the following text extracted from a file and identify only its high-level structural components, such as parts or chapters.

Extracted Text:
---
{document_text}
---

The total number of pages in the document is: {total_pages}.

**Requirements:**
1.  Identify the main structural components (e.g., chapters, parts) in the document.
2.  Do not break these components down into sub-lessons or smaller sections at this stage.
3.  Estimate the start and end page numbers for each main component.
4.  The last component must extend to the end of the document (page {total_pages}).
5.  If you cannot identify clear components, create a single component that covers the entire document.

{json_warning}
The response must be an array of component objects, following this exact schema:
{schema}"""

CHAPTER_LESSONS_PROMPT = """You are an expert in curriculum design. The following text is from a component of a book titled "{chapter_title}", which spans from page {start_page} to {end_page}.
Your task is to break this text down into smaller, logical educational "lessons".

Text for analysis:
---
{chapter_text}
---

**Requirements:**
1.  Identify logical lessons within the text.
2.  For each lesson, provide a descriptive title.
3.  Estimate the start and end pages for each lesson. These pages must be within the original component's range [{start_page}, {end_page}].
4.  If you cannot identify any clear lessons, return an empty array.

{json_warning}
The response must be an array of lesson objects with this schema:
{schema}"""

# 인터랙티브 학습 콘텐츠
INTERACTIVE_LESSON_PROMPT = """You are a highly intelligent educational expert. Your mission is to provide a **thorough and detailed explanation** of the following text from a document, transforming it into a comprehensive learning unit in English.

Extracted text from the document:
---
{lesson_text}
---

**Core Rules (must be strictly followed):**
1.  **Comprehensive Explanation (No Summarizing):** Explain the content in full detail. **Do not summarize the content at all**. The goal is to deepen understanding, not to be brief.
2.  **Adherence to Source:** All explanations must be strictly based on the provided text from the document. The only exception is the mandatory examples required below.
3.  **Inclusion of Practical Examples:** If the topic relates to **Mathematics, Physics, Chemistry, or Statistics**, include a section titled **"Illustrative Examples"** containing **exactly two (2)** practical, step-by-step solved examples.
4.  **No Question Generation:** Do not create any test questions of any kind at this stage.
5.  **No Images:** Do not include any type of image or diagram blocks.

**Output Format (JSON):**
{json_warning}
The JSON object must follow this exact schema:
{{
  "title": "string",
  "content": [
    {{ "type": "explanation", "text": "string" }},
    {{ "type": "math_formula", "latex": "string" }}
  ]
}}"""

QUESTION_SCHEMA = """[
  {{ "type": "multiple_choice_question", "question": "string", "options": ["string"], "correctAnswerIndex": number }},
  {{ "type": "true_false_question", "question": "string", "correctAnswer": boolean }},
  {{ "type": "fill_in_the_blank_question", "questionParts": ["string"], "correctAnswers": ["string"] }},
  {{ "type": "open_ended_question", "question": "string" }}
]"""

FILL_IN_THE_BLANK_RULE = """For fill_in_the_blank_question, each blank sits between two consecutive entries of "questionParts", so "questionParts" must contain exactly one more entry than "correctAnswers" (use an empty string when the sentence ends with a blank)."""

INITIAL_QUESTIONS_PROMPT = """You are an expert in creating educational assessments. Your task is to generate questions based on the following lesson text.

Lesson Text:
---
{lesson_text}
---

**Requirements:**
1.  Create a comprehensive and varied test of **{count} questions** based on the lesson text.
2.  Use different question types (multiple choice, true/false, fill-in-the-blank, open-ended) to test understanding deeply.
3.  Ensure each object in the array is complete and follows the schema precisely. Check that all property names like 'question', 'options', and 'correctAnswerIndex' are spelled correctly and enclosed in double quotes.
4.  {blank_rule}

**Output Format (JSON):**
{json_warning}
The response must be an array of question objects that follow one of these schemas:
{schema}"""

MORE_QUESTIONS_PROMPT = """You are an expert in curriculum design. Your task is to generate additional questions based on the following lesson text.

Lesson Text:
---
{lesson_text}
---

Existing Questions (avoid repeating them):
---
- {existing_questions}
---

**Requirements:**
1.  Generate **{count} new and varied questions**.
2.  The questions must be **different** from the existing ones.
3.  Use different question types.
4.  {blank_rule}

**Output Format (JSON):**
{json_warning}
The response must be an array of question objects that follow one of these schemas:
{schema}"""

# 채점 및 교정
FEEDBACK_PROMPT = """You are an expert teacher. Your task is to evaluate a student's answers and provide constructive feedback in English.

The questions and the student's answers, with the correct answers for comparison:
---
{qa_pairs}
---

**Strict Requirements:**
1.  For each item, compare the `userAnswer` with the `correctAnswer`.
2.  Fill the `isCorrect` field with `true` if it's correct, and `false` if it's wrong.
3.  In the `explanation` field:
    - If the answer is **correct**, provide simple encouragement like "Great answer!".
    - If the answer is **incorrect**, the explanation must start by stating the answer is incorrect, **then you must clearly state the correct answer**.

{json_warning}
The response must be an array of objects, following this exact schema, ensuring you return the same `questionId` provided for each item:
[
  {{
    "questionId": "string",
    "isCorrect": boolean,
    "explanation": "string"
  }}
]"""

CORRECTIONS_PROMPT = """You are an expert and understanding teacher. You have been asked to review a student's incorrect answers and provide a detailed and constructive correction for each one in English.

Incorrect Questions and Answers:
---
{incorrect_answers}
---

**Requirements:**
1.  For each question, clearly explain **why the student's answer was wrong**.
2.  Then, provide the **correct answer with a full and simple explanation of the logic** behind it.
3.  Make the explanation easy to understand and encouraging.

{json_warning}
The response must be an array of objects, following this exact schema, ensuring you return the same `questionId` provided for each item:
[
  {{
    "questionId": "string",
    "correction": "string"
  }}
]"""

DEEPER_EXPLANATION_PROMPT = """You are an expert teacher specializing in simplifying complex concepts. You've been asked to provide a more detailed and simpler explanation of the following concept for a student who didn't understand it well the first time.

Concept to explain:
---
"{text}"
---

**Requirements:**
1.  Re-explain the concept in simple and clear English, or based on the document's language.
2.  Use analogies or real-world examples to make the idea more accessible.
3.  Break down the explanation into small, easy-to-follow points if possible.
4.  Your response should be only the explanation, without any introductions or additional phrases."""

OPEN_ENDED_GRADING_NOTE = "This is an open-ended question. Evaluate the answer's logic and relevance to the question."

# 학습 도구
SUMMARY_STYLE_SECTION = """
**Step 2.5: Apply Requested Style**
In addition to the previous rules, you must apply the following style to the summary: "{style}". This directive is mandatory and prioritizes how the content is presented.
"""

SUMMARY_PROMPT = """You are a highly precise summarization expert. Your task is to strictly follow the steps below to create a detailed summary of a book chapter.

**Step 1: Confirm Word Count**
The full text of the chapter is provided below. Our calculated word count is {word_count} words.

**Step 2: Determine Summary Length**
Create a detailed summary that is exactly **one-quarter (25%)** the length of the original text, approximately **{target_words} words**. Adhering to this length is mandatory.
{style_section}
**Full Chapter Text:**
---
{chapter_text}
---

**Strict and Mandatory Rules for the Summary:**
1.  **Focus on Detail:** The summary must be a condensed version of the original text, retaining all important details and ideas.
2.  **Adhere to Length:** Stick to the target summary length (around {target_words} words).
3.  **No Introductions:** Start the summary directly. Do not use phrases like "This text summarizes...".
4.  **Preserve Style:** Maintain the same tone and style as the original author (unless a different style is specified in Step 2.5).
5.  **No Conclusions:** Do not add any conclusions that were not in the original text.
6.  **Comprehensiveness:** Extract all main ideas, arguments, evidence, and important examples.

**Required:**
Return only the detailed summary as plain text without any headings or markdown formatting."""

PROOFREAD_PROMPT = """You are a proofreading agent. Your task is to review the following text and correct any spelling or grammatical errors.
Text:
---
{text}
---
Required: Return only the corrected text, without any introductions, headings, or markdown."""

SEARCH_FILTER_INSTRUCTIONS = {
    "video": "Focus your search primarily on the YouTube platform.",
    "sites": "Exclude YouTube from your search results and focus on other educational websites.",
    "all": "Search across both websites and the YouTube platform.",
}

MATERIAL_SEARCH_PROMPT = """You are an expert search engine specializing in educational content. Your task is to find educational resources about: "{query}".

**Strict Rules:**
1.  **Focused Search:** Search only on educational websites and YouTube channels. {filter_instruction}
2.  **No Summaries:** Do not write any introduction, summary, or conclusion. List the links only.
3.  **Precise Output Format:** Each line in your response must be in this exact format:
    [Direct link to the site or video] - [A description in English of exactly 7 words]
4.  **Order:** Display website links first, then YouTube links.
5.  **Quantity:** Try to find as many results as possible (up to 100).

**Example of required format:**
https://www.example.edu/physics101 - The best explanation for high school physics.
https://www.youtube.com/watch?v=example - Final exam review for organic chemistry concepts."""

DOCUMENT_SEARCH_PROMPT = """You are an expert research assistant. Your task is to answer the user's query based ONLY on the provided text context.

CONTEXT:
---
{context}
---

USER QUERY: "{query}"

REQUIREMENTS:
1. Find the most relevant information in the context to answer the query.
2. If the answer is found, formulate a clear and concise answer in English.
3. Extract the exact quote(s) from the context that support your answer.
4. Identify the page number(s) from the context. Page numbers are denoted by "--- PAGE [number] ---". Formulate this as "p. X" or "pp. X-Y". If you cannot determine the page, use "N/A".
5. Generate 3 insightful follow-up questions in English that the user might have.
6. If the answer cannot be found in the context, state that clearly in English, and leave the other fields empty.

{json_warning}
Adhere strictly to this schema:
{{
  "answer": "string",
  "quote": "string",
  "pages": "string",
  "follow_ups": ["string", "string", "string"]
}}"""

DOCUMENT_SEARCH_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "answer": {"type": "STRING"},
        "quote": {"type": "STRING"},
        "pages": {"type": "STRING"},
        "follow_ups": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["answer", "quote", "pages", "follow_ups"],
}

IMAGE_TEXT_PROMPT = "Extract any text visible in this image. Respond only with the extracted text, maintaining original line breaks if possible. If no text is present, respond with an empty string."

CATEGORIZE_BOOKS_PROMPT = """You are an expert librarian AI. Your task is to categorize the following list of book titles into main categories and relevant sub-categories.

Book Titles (with their original IDs):
{book_list}

Requirements:
1. Analyze each title to determine its subject matter.
2. Group books under appropriate main categories (e.g., "Computer Science", "History", "Literature").
3. Within each main category, group books into more specific sub-categories (e.g., "Web Development", "Roman History").
4. Each book title from the input list must appear in exactly one sub-category. Respond with the book's title only, not the ID.

{json_warning}
JSON Schema:
An array of main category objects. Each object has:
- "category": string (The name of the main category in English)
- "subCategories": An array of sub-category objects. Each object has:
  - "subCategory": string (The name of the sub-category in English)
  - "books": An array of strings, where each string is a book title belonging to this sub-category."""

CATEGORIZE_BOOKS_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "category": {"type": "STRING"},
            "subCategories": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "subCategory": {"type": "STRING"},
                        "books": {"type": "ARRAY", "items": {"type": "STRING"}},
                    },
                    "required": ["subCategory", "books"],
                },
            },
        },
        "required": ["category", "subCategories"],
    },
}

CHAT_SYSTEM_INSTRUCTION = "You are an intelligent and friendly study assistant. Answer questions in English in a helpful and concise manner."

CONTEXT_CHAT_SYSTEM_INSTRUCTION = """You are an intelligent and specialized assistant. Your task is to answer user questions based ONLY on the following provided context. Do not use any external information. If the answer is not in the context, clearly state that to the user.

Context:
---
{context}
---"""
