from __future__ import annotations
from typing import List, Optional

from .schemas import ChatMessage


WRITING_TASK_TYPES = ("IELTS", "TOEIC", "General")


def build_writing_prompt(text: str, task_type: str = "General") -> str:
	return f"""
Act as an expert English teacher and examiner for {task_type}.
Analyze the following text provided by a student.

Student Text: "{text}"

Your task:
1. Check for grammatical errors, spelling mistakes, and awkward phrasing.
2. Suggest better vocabulary appropriate for a high-level context.
3. Give a band score (0-10 scale based on accuracy and complexity).
4. Provide a rewritten, improved version of the text.
5. Provide specific sub-scores for: Task Response, Coherence & Cohesion, Lexical Resource, Grammatical Range & Accuracy.

Return the result strictly in this JSON format:
{{
  "score": number,
  "scoreBreakdown": {{
    "Task Response": number,
    "Coherence": number,
    "Vocabulary": number,
    "Grammar": number
  }},
  "feedback": "string (general encouraging feedback)",
  "detailedErrors": [
    {{
      "original": "string (the mistake)",
      "correction": "string (the fix)",
      "explanation": "string (why it is wrong)",
      "type": "grammar" | "vocabulary" | "coherence"
    }}
  ],
  "improvedVersion": "string"
}}
""".strip()


def format_history(history: List[ChatMessage], *, examiner_label: str = "Examiner", student_label: str = "Student") -> str:
	return "\n".join(
		f"{examiner_label if message.role == 'ai' else student_label}: {message.text}" for message in history
	)


def build_examiner_instruction(history: List[ChatMessage], topic: str) -> str:
	return f"""
You are a friendly but professional IELTS Speaking Examiner.
The topic is: "{topic}".
Your goal is to conduct a short interview.
Current Conversation History:
{format_history(history)}
""".strip()


def build_examiner_prompt(
	topic: str,
	*,
	has_audio: bool,
	specific_question: Optional[str] = None,
	is_finish: bool = False,
) -> str:
	# Opening turn: nothing to transcribe yet
	if not has_audio:
		if specific_question:
			return (
				f'Start the interview. Introduce yourself briefly (1 sentence) and ask exactly this question: "{specific_question}". '
				'Return JSON: { "transcription": "", "response": "Your intro and question" }'
			)
		return (
			f'Start the interview. Introduce yourself briefly and ask the first question about "{topic}". '
			'Return JSON: { "transcription": "", "response": "Your intro and question" }'
		)

	transcription_instruction = "1. Transcribe the user's audio accurately."
	if is_finish:
		return f"""
The user just answered the final question via audio.
{transcription_instruction}
2. Generate a brief polite closing statement (e.g. "Thank you for your answers. The test is now finished.").
Do NOT ask another question.
Return JSON: {{ "transcription": "exact words spoken by student", "response": "Closing statement" }}
""".strip()
	if specific_question:
		next_step = f'3. Ask exactly this NEXT question: "{specific_question}".'
	else:
		next_step = "3. Ask the NEXT follow-up question related to the topic."
	return f"""
The user just answered via audio.
{transcription_instruction}
2. Generate a brief, natural response to acknowledge their answer (e.g., "That's interesting," "I see").
{next_step}
4. Keep your response concise (under 30 words) so the student talks more.
Return JSON: {{ "transcription": "exact words spoken by student", "response": "Your reaction + next question" }}
""".strip()


def build_session_grading_prompt(history: List[ChatMessage], topic: str) -> str:
	transcript = "\n".join(f"{message.role.upper()}: {message.text}" for message in history)
	return f"""
Act as a Speaking Examiner.
Topic: "{topic}".
HERE IS THE TRANSCRIPT:
{transcript}

Your task is to evaluate the student's performance based STRICTLY on the following rubric (Total 10 points):
**1. Content (Max 3)**
**2. Language (Max 3)**
**3. Pronunciation (Max 2)**
**4. Fluency (Max 2)**

Return the result strictly in this JSON format:
{{
  "transcription": "Full session transcript...",
  "score": number,
  "scoreBreakdown": {{ "Content": number, "Language": number, "Pronunciation": number, "Fluency": number }},
  "feedback": "string (Overall feedback in Vietnamese or English)",
  "detailedErrors": [ {{ "original": "...", "correction": "...", "explanation": "...", "type": "pronunciation" }} ]
}}
""".strip()


def build_pronunciation_prompt(target_text: str) -> str:
	return f"""
Act as a strict pronunciation coach.
The student is trying to read this specific sentence: "{target_text}".
Analyze the attached audio recording based on the following rubric (Total 10 points).

* Articulation (3)
* Intonation & Stress (3)
* Fluency & Linking (2)
* Confidence (2)

Return JSON:
{{
  "transcription": "string",
  "score": number,
  "scoreBreakdown": {{ "Articulation": number, "Intonation": number, "Fluency": number, "Confidence": number }},
  "feedback": "string",
  "detailedErrors": []
}}
""".strip()
