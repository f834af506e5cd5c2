"""
Input validation and sanitization utilities
"""
import re
import html
from typing import Optional
from email_validator import validate_email as check_email, EmailNotValidError
from fastapi import HTTPException

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')


class InputValidator:
    """Centralized input validation and sanitization"""

    @staticmethod
    def sanitize_string(text: str, max_length: Optional[int] = None) -> str:
        """Escape markup, drop control characters and collapse whitespace"""
        if not text:
            return ""

        cleaned = _CONTROL_CHARS.sub(' ', text)
        cleaned = ' '.join(html.escape(cleaned).split())
        if max_length:
            cleaned = cleaned[:max_length]
        return cleaned

    @staticmethod
    def validate_email(email: str) -> str:
        """Normalize an address to lower case; 400 if it is not an address at all"""
        if not email or not email.strip():
            raise HTTPException(status_code=400, detail="Email is required")

        try:
            checked = check_email(email.strip(), check_deliverability=False)
        except EmailNotValidError:
            raise HTTPException(status_code=400, detail="Invalid email format")
        return checked.normalized.lower()

    @staticmethod
    def validate_name(name: str) -> str:
        """Names end up in invitation e-mails and result listings"""
        cleaned = InputValidator.sanitize_string(name or "", max_length=100)
        if len(cleaned) < 2:
            raise HTTPException(status_code=400, detail="Name must be at least 2 characters long")
        return cleaned
