# ai_book/core/dummy_data.py
import json
import random
from typing import List, Dict, Any

from .config import config

# 1x1 transparent PNG returned by image generation in dummy mode
DUMMY_IMAGE_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

DUMMY_QUESTIONS: Dict[str, List[Dict[str, Any]]] = {
    "MultipleChoice": [
        {
            "questionText": "Which organelle carries out photosynthesis in plant cells?",
            "type": "MultipleChoice",
            "options": ["Mitochondria", "Chloroplast", "Nucleus", "Ribosome"],
            "correctAnswer": "Chloroplast"
        },
        {
            "questionText": "Which gas do plants absorb during photosynthesis?",
            "type": "MultipleChoice",
            "options": ["Oxygen", "Nitrogen", "Carbon dioxide", "Hydrogen"],
            "correctAnswer": "Carbon dioxide"
        },
        {
            "questionText": "What is the main product of photosynthesis stored by the plant?",
            "type": "MultipleChoice",
            "options": ["Glucose", "Protein", "Fat", "Salt"],
            "correctAnswer": "Glucose"
        }
    ],
    "FillInTheBlank": [
        {
            "questionText": "The green pigment that absorbs light is called ____.",
            "type": "FillInTheBlank",
            "correctAnswer": "chlorophyll"
        },
        {
            "questionText": "Photosynthesis releases ____ into the air.",
            "type": "FillInTheBlank",
            "correctAnswer": "oxygen"
        }
    ],
    "TrueFalse": [
        {
            "questionText": "Photosynthesis needs sunlight.",
            "type": "TrueFalse",
            "correctAnswer": "{true}"
        },
        {
            "questionText": "Roots are the main site of photosynthesis.",
            "type": "TrueFalse",
            "correctAnswer": "{false}"
        }
    ]
}

DUMMY_PROJECT_PLAN = """# {title}

## 1. Overview
A short project that turns the idea into a working prototype within a few weeks.

## 2. Goals
- Define the scope and success criteria in the first week
- Deliver a working prototype by week three
- Present the results to classmates or stakeholders

## 3. Work Plan and Timeline
1. **Week 1:** research and requirements
2. **Week 2:** design and first build
3. **Week 3:** testing and improvements
4. **Week 4:** documentation and presentation

## 4. Suggested Tools and Technologies
- A shared document for planning
- A version control repository
- Presentation software

## 5. Presentation Summary
- The problem and why it matters
- The approach and the prototype
- Results, lessons learned and next steps
"""

DUMMY_LESSON = """# Lesson explained ({style})

**Main idea:** the lesson describes how a process works step by step.

1. Start from what the learner already knows.
2. Introduce the new concept with a simple example.
3. Connect the concept to everyday life.

> Summary: understanding the *why* makes the *how* easy to remember.
"""

DUMMY_CHAT_REPLIES = [
    "Hello! I am the {site} assistant. I can help you with the exam maker, the lesson explainer and the project builder.",
    "The exam maker builds an interactive quiz from any text or file you provide.",
    "The project builder turns your idea into a step-by-step plan and can design an image for it.",
    "The lesson explainer rewrites a lesson in a philosophical, scientific or simple style."
]

class DummyDataService:
    """Canned generator output for running without API keys"""

    def __init__(self):
        self.questions = DUMMY_QUESTIONS
        self.chat_replies = DUMMY_CHAT_REPLIES

    def get_exam_json(self, exam_type: str = "Integrated", title: str = "Photosynthesis Quiz") -> str:
        """Return an exam JSON document shaped like the generator output"""
        if exam_type in self.questions:
            questions = list(self.questions[exam_type])
        else:
            questions = [q for group in self.questions.values() for q in group]

        rendered = []
        for question in questions:
            question = dict(question)
            question["correctAnswer"] = question["correctAnswer"].format(
                true=config.TRUE_TOKEN, false=config.FALSE_TOKEN
            )
            rendered.append(question)

        return json.dumps({"title": title, "questions": rendered}, ensure_ascii=False)

    def get_project_plan(self, idea: str) -> str:
        title = idea.strip().splitlines()[0][:80] if idea and idea.strip() else "Project Plan"
        return DUMMY_PROJECT_PLAN.format(title=title)

    def get_lesson(self, style: str) -> str:
        return DUMMY_LESSON.format(style=style)

    def get_chat_reply(self, turn: int) -> str:
        """Greeting on the first turn, then a random feature tip"""
        if turn <= 0:
            return self.chat_replies[0].format(site=config.SITE_NAME)
        return random.choice(self.chat_replies[1:])

    def get_image_base64(self) -> str:
        return DUMMY_IMAGE_BASE64

    def validate_dummy_data(self) -> bool:
        """Validate dummy data integrity"""
        try:
            for exam_type, questions in self.questions.items():
                if not questions:
                    return False
                for question in questions:
                    required_fields = ["questionText", "type", "correctAnswer"]
                    if not all(field in question for field in required_fields):
                        return False
                    if question["type"] != exam_type:
                        return False
            return bool(self.chat_replies)
        except Exception:
            return False

# Global dummy data service instance
dummy_data_service = DummyDataService()

def get_dummy_data_service() -> DummyDataService:
    """Get dummy data service instance"""
    return dummy_data_service
