"""
Prompt construction for every AI call.

All builders are pure: the same arguments always give the same prompt.
Listing previously generated titles is the caller's job (a database read),
so two concurrent generate calls can still produce the same title.
"""
import json
from typing import Iterable, Optional

from hiredready.errors import InvalidInput
from hiredready.models import Difficulty

RESUME_GUARD_CHARS = 1500


def parse_difficulty(value: Optional[str], case_insensitive: bool = False) -> Difficulty:
    """Validate a difficulty before any AI call or write happens."""
    if isinstance(value, str) and case_insensitive:
        value = value[:1].upper() + value[1:].lower()
    try:
        return Difficulty(value)
    except ValueError:
        raise InvalidInput("Invalid difficulty level")


def exclusion_clause(existing_titles: Iterable[str]) -> str:
    titles = [t for t in existing_titles if t]
    if not titles:
        return "This is the first question of this difficulty."
    joined = '", "'.join(titles)
    return f'Please ensure the new question title is NOT one of the following: "{joined}".'


def practice_question_prompt(difficulty: Difficulty, existing_titles: Iterable[str],
                             topic: str = "Data Structures and Algorithms") -> str:
    avoid = exclusion_clause(existing_titles)
    if difficulty == Difficulty.EASY:
        return f"""
Generate a beginner-friendly, 'Easy' level coding challenge suitable for someone new to programming or preparing for their first-ever technical screening. The language is JavaScript.

**Characteristics of an 'Easy' problem for this context:**
- It MUST focus on fundamental programming concepts like loops, basic string manipulation, or array iteration.
- It MUST primarily involve basic data types: strings, numbers, and simple arrays.
- It must NOT require complex data structures (like trees, graphs, linked lists, hash maps) or advanced algorithms (like dynamic programming, recursion, or complex sorting).
- The solution should be achievable with a single loop and/or common built-in array/string methods.

**Here are examples of the kind of 'Easy' problems wanted:**
- "Reverse a String"
- "Check if a String is a Palindrome"
- "FizzBuzz"
- "Find the Maximum Number in an Array"
- "Count the Vowels in a String"
- "Remove Duplicates from an Array"
- "Sum of All Elements in an Array"

IMPORTANT: {avoid} Please create a completely new and unique challenge that fits the 'Easy' criteria described above.

Provide your response as a JSON object with three keys: "title", "prompt" (Markdown), and "solutionTemplate".
""".strip()

    return f"""
Generate a {difficulty.value}-level coding challenge about {topic} for a software engineering interview.
The language is JavaScript.

IMPORTANT: {avoid} Please create a completely new and unique challenge.

Provide your response as a JSON object with three keys: "title", "prompt" (Markdown), and "solutionTemplate".
""".strip()


def catalog_question_prompt(difficulty: Difficulty, category: str = "General",
                            language: str = "javascript",
                            existing_titles: Iterable[str] = ()) -> str:
    d = difficulty.value
    titles = list(existing_titles)
    avoid = f"\n\nIMPORTANT: {exclusion_clause(titles)}" if titles else ""
    return f"""Generate a {d} level coding question for interview preparation in the {category} category. The candidate will mostly use {language}.{avoid}

Please provide the response in this exact JSON format:
{{
  "title": "Problem title",
  "description": "Detailed problem description with clear requirements",
  "difficulty": "{d}",
  "category": "{category}",
  "constraints": "Input constraints and limitations",
  "examples": [
    {{
      "input": "example input",
      "output": "expected output",
      "explanation": "why this output"
    }}
  ],
  "starterCode": {{
    "javascript": "function solution() {{ // Your code here }}",
    "python": "def solution(): # Your code here pass",
    "java": "public class Solution {{ public static void main(String[] args) {{ // Your code here }} }}",
    "cpp": "#include <iostream>\\nusing namespace std;\\n\\nint main() {{\\n    // Your code here\\n    return 0;\\n}}"
  }},
  "testCases": [
    {{
      "input": "test input",
      "expectedOutput": "expected result",
      "isHidden": false
    }}
  ],
  "hints": ["hint 1", "hint 2"],
  "tags": ["relevant", "tags"]
}}

Make sure the problem is:
- Clear and well-defined
- Appropriate for {d} level
- Has multiple test cases, some of them marked hidden
- Includes helpful examples
- Provides starter code in multiple languages"""


def submission_feedback_prompt(question, code: str, language: str, execution) -> str:
    return f"""Analyze this {language} code submission for the following problem:

Problem: {question.title}
Description: {question.description}
Difficulty: {question.difficulty}

Code submitted:
```{language}
{code}
```

Execution Result:
- Status: {execution.status}
- Test cases passed: {execution.passed}/{execution.total}
- Execution time: {execution.execution_time_ms}ms

Please provide feedback in this JSON format:
{{
  "overall": "Overall assessment of the solution",
  "codeQuality": "Assessment of code quality, readability, and best practices",
  "timeComplexity": "Time complexity analysis (Big O notation)",
  "spaceComplexity": "Space complexity analysis (Big O notation)",
  "suggestions": ["improvement suggestion 1", "improvement suggestion 2"],
  "score": 85
}}

Score should be an integer 0-100 based on correctness, efficiency, and code quality."""


def code_review_prompt(problem_markdown: str, user_code: str) -> str:
    example = json.dumps({
        "feedbackMarkdown": "### Code Review\n\n**Correctness:** Your solution is correct...\n"
                            "**Complexity:** The time complexity is O(n^2)...\n"
                            "**Suggestions:** You could optimize this using a hash map...",
        "isCorrect": True,
    }, indent=2)
    return f"""As an expert code reviewer for a top tech company, analyze the following JavaScript code submission.

Problem Description:
{problem_markdown}

User's Code Submission:
```javascript
{user_code}
```

Provide feedback as a JSON object with two keys:
1. "feedbackMarkdown": A comprehensive review in Markdown. Analyze correctness, time and space complexity, and code style. Offer specific, constructive suggestions for improvement. Address edge cases if missed.
2. "isCorrect": A boolean value indicating if the solution correctly solves the problem's main requirements.

Example JSON format:
{example}"""


def quiz_prompt(role: str, experience: str) -> str:
    return f"""Generate a 5-question multiple-choice quiz for an interview candidate applying for a "{role}" position with {experience} years of experience.
For each question, provide:
1. A "question" text.
2. An array of 4 "options".
3. The exact "correctAnswer" from the options array.

Return the output as a single, minified JSON array like this:
[{{"question": "...", "options": ["A", "B", "C", "D"], "correctAnswer": "B"}}, ...]"""


def resume_guard_prompt(resume_text: str) -> str:
    return f"""You are a document classification expert. Analyze the following text and determine if it is a professional resume or curriculum vitae (CV).
Your response must be a JSON object ONLY, with no other text or markdown.
The JSON object must have two keys:
1. "is_resume": A boolean value (true if it is a resume/CV, false otherwise).
2. "reason": A brief, one-sentence explanation for your decision.

Text to analyze:
---
{resume_text[:RESUME_GUARD_CHARS]}
---"""


def resume_analysis_prompt(resume_text: str) -> str:
    return f"""You are an expert career coach and resume reviewer, specializing in the tech industry.

Analyze the following resume for a software engineering role. Provide a comprehensive, constructive, and detailed review.

**Instructions for the Analysis:**

1. **Overall Score:** Provide an overall score out of 100.
2. **Score Breakdown:** Justify the score with a breakdown in these categories (each out of 100):
   * **Clarity & Formatting:** Is it easy to read? Is the layout clean and professional?
   * **Impact & Action Verbs:** Does the candidate use strong, results-oriented language?
   * **Technical Skills Showcase:** Are the technical skills clearly listed and relevant?
   * **Experience Relevance:** Is the work experience relevant and well-described?
3. **Detailed Summary:** A concise summary of the candidate's profile, skills, and experience.
4. **Strengths:** The top 3-4 strengths of the resume.
5. **Actionable Feedback for Improvement:** Specific things the candidate MUST fix. For each point explain why it is a problem and give a concrete rewrite.
6. Give the final score to the resume, for example 70 out of 100.

Format the entire output in Markdown.
**Resume Content to Analyze:**
---
{resume_text}
---"""
