# ai_book/core/exceptions.py
"""
Error taxonomy shared by the services and the API layer
"""


class GenerationFailure(Exception):
    """The generator call failed or returned unusable content"""

    user_message = "Content generation failed. Please try again."

    def __init__(self, message: str = None):
        super().__init__(message or self.user_message)


class MalformedExamError(GenerationFailure):
    """Generated exam text did not parse into a valid exam"""

    user_message = "The AI response was not a valid exam. Please try again."


class SessionNotFoundError(KeyError):
    """No live exam session or chat with the given id"""

    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session not found or expired: {self.session_id}"
