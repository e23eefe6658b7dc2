# ai_book/core/prompts.py
from .config import config

class PromptTemplates:
    """Centralized prompt template management"""

    @staticmethod
    def create_exam_prompt(difficulty: str, exam_type: str, source_text: str) -> str:
        """Prompt asking the generator for one exam JSON object"""
        options = config.MULTIPLE_CHOICE_OPTIONS
        language = config.CONTENT_LANGUAGE

        if exam_type == "Integrated":
            type_rule = "Mix all three question types: MultipleChoice, FillInTheBlank and TrueFalse."
        else:
            type_rule = f"Every question must have type \"{exam_type}\"."

        return f"""You are an AI assistant that writes educational exams as JSON.
Create a complete exam based on the provided content.

PARAMETERS:
- Difficulty: {difficulty}
- Exam type: {exam_type}
- Answers are always strings.

CONTENT:
{source_text or "(see the attached file)"}

INSTRUCTIONS:
- Return ONE JSON object and nothing else, exactly in this shape:
  {{"title": string, "questions": [{{"questionText": string, "type": "MultipleChoice" | "FillInTheBlank" | "TrueFalse", "options": [string] | null, "correctAnswer": string}}]}}
- {type_rule}
- For MultipleChoice questions give exactly {options} options; correctAnswer must be copied from the options.
- For FillInTheBlank questions correctAnswer is the missing word only; options is null.
- For TrueFalse questions correctAnswer is either '{config.TRUE_TOKEN}' or '{config.FALSE_TOKEN}'; options is null.
- Give the exam an engaging title.
- Write all text in {language}."""

    @staticmethod
    def create_project_plan_prompt(idea: str) -> str:
        """Prompt for a Markdown project plan"""
        return f"""You are an AI assistant that helps students and professionals plan projects.
Based on the project idea below, write a comprehensive project plan in {config.CONTENT_LANGUAGE}.

PROJECT IDEA:
{idea}

INSTRUCTIONS:
- Write a detailed plan for this idea.
- Output well organized Markdown in {config.CONTENT_LANGUAGE}.
- Include these sections with clear headings:
  1. **Overview:** a short summary of the idea.
  2. **Goals:** clear, measurable goals (SMART goals where possible).
  3. **Work Plan and Execution:** step-by-step plan with estimated milestones or a timeline.
  4. **Suggested Tools and Technologies:** recommended software, languages or other resources.
  5. **Presentation Summary:** key points for presenting the project."""

    @staticmethod
    def create_image_prompt(description: str) -> str:
        """Prompt for an illustrative image"""
        return f"""Create a clear, high quality illustration for an educational project.
Description: {description}
Avoid any text inside the image."""

    @staticmethod
    def create_lesson_prompt(style: str, lesson_text: str) -> str:
        """Prompt for explaining a lesson in a given style"""
        style_rules = {
            "Philosophical": "Explore the deeper meaning, the questions behind the ideas and how they connect to human thought.",
            "Scientific": "Be precise and structured, define terms, give evidence, formulas or experiments where relevant.",
            "Simple": "Use short sentences, everyday examples and analogies a school student understands."
        }
        rule = style_rules.get(style, style_rules["Simple"])

        return f"""You are a teacher who explains lessons clearly.
Explain the following lesson in a {style.lower()} style.

STYLE:
{rule}

LESSON:
{lesson_text or "(see the attached file)"}

INSTRUCTIONS:
- Output well organized Markdown in {config.CONTENT_LANGUAGE}.
- Start with the main idea, then explain step by step.
- End with a short summary of the key points."""

    @staticmethod
    def assistant_system_instruction() -> str:
        """System instruction for the site assistant chat"""
        return (
            f"You are a smart assistant on a website called \"{config.SITE_NAME}\". "
            "Your job is to help users understand the website and answer their questions. "
            "The website offers three tools: the exam maker, the lesson explainer and the project builder. "
            f"Be friendly and helpful, answer in {config.CONTENT_LANGUAGE}, and introduce yourself at the start."
        )

    @staticmethod
    def assistant_greeting() -> str:
        """First user turn that makes the assistant introduce itself"""
        return "Hello"
