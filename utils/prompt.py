QUIZ_JSON_SHAPE = """{
    "title": "Title of the question bank",
    "description": "A brief description",
    "questions": [
        {
            "questionNumber": 1,
            "question": "Question text?",
            "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
            "answer": "The correct option, written exactly as it appears in options"
        }
    ]
}"""


def quiz_from_text_prompt(text):
    return f"""
You are a JSON generator for academic question banks.

Task:
- Read the text below and turn the questions it contains (or implies) into multiple-choice questions.
- Number the questions sequentially starting from 1.
- Every question must have four distinct options.
- The answer must be copied exactly from one of the options.

Return a pure JSON object like:
{QUIZ_JSON_SHAPE}

Text:
'''{text}'''

Important: Do NOT add any extra text. Only return valid JSON, starting with '{{' and ending with '}}'.
"""


def custom_quiz_prompt(text, number_of_questions, difficulty):
    return f"""
You are a JSON generator for academic question banks.

Task:
- Generate exactly {number_of_questions} multiple-choice questions based on the text below.
- All questions and answers must be derived from the text.
- Difficulty level: {difficulty}.
- Every question must have four distinct, plausible options.
- Provide the correct answer as the complete option string, not a letter.

Return a pure JSON object like:
{QUIZ_JSON_SHAPE}

Text:
'''{text}'''

Important: Do NOT add any extra text. Only return valid JSON, starting with '{{' and ending with '}}'.
"""


def topic_quiz_prompt(title, description, number_of_questions, difficulty):
    return f"""
You are a JSON generator for academic question banks.

Task:
- Title: {title}
- Description: {description}
- Generate exactly {number_of_questions} questions. No more, no less.
- Follow the difficulty level: {difficulty}.
  - Easy: straightforward and factual.
  - Medium: requires some reasoning.
  - Hard: complex, requires deep understanding.
- Questions must be strictly relevant to the title and description.
- Every question must have four distinct options; the answer must be one of them, written in full.

Return a pure JSON object like:
{QUIZ_JSON_SHAPE}

Use the given title and description in the JSON.

Important: Do NOT add any extra text. Only return valid JSON, starting with '{{' and ending with '}}'.
"""


def transcribe_image_prompt():
    return """
Transcribe all text visible in this image exactly as written, including question
numbers and answer choices. Return plain text only, no commentary.
"""
