"""
User data models
"""
from pydantic import BaseModel
from typing import Any, Dict
from enum import Enum


class UserRole(str, Enum):
    teacher = "teacher"
    student = "student"


class User(BaseModel):
    id: str
    email: str
    name: str
    role: UserRole = UserRole.student


class StudentRef(BaseModel):
    """Name/email projection of a student, resolved onto aggregates"""
    id: str
    name: str
    email: str

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "StudentRef":
        return cls(
            id=doc_id,
            name=data.get("name") or "Unknown",
            email=data.get("email") or "Unknown"
        )
