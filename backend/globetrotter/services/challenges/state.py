from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class ParticipantRole(Enum):
    INVITER = 'inviter'
    GUEST = 'guest'

    @classmethod
    def for_user(cls, inviter: str, username: str) -> 'ParticipantRole':
        return cls.INVITER if username == inviter else cls.GUEST


@dataclass
class ChallengeState:
    id: str
    inviter: str
    score: int = 0
    correct_answers: int = 0
    incorrect_answers: int = 0
    clues_revealed: int = 0
    is_active: bool = True
    question_ids: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    def role_of(self, username: str) -> ParticipantRole:
        return ParticipantRole.for_user(self.inviter, username)

    def to_dict(self):
        payload = {
            'id': self.id,
            'inviter': self.inviter,
            'score': self.score,
            'correct_answers': self.correct_answers,
            'incorrect_answers': self.incorrect_answers,
            'clues_revealed': self.clues_revealed,
            'is_active': self.is_active,
            'question_ids': list(self.question_ids),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if self.ended_at:
            payload['ended_at'] = self.ended_at.isoformat()
        return payload


@dataclass
class QuestionPayload:
    question_id: str
    clues: List[str]
    choices: List[str]
    trivia: str

    def to_dict(self):
        return {
            'question_id': self.question_id,
            'clues': list(self.clues),
            'choices': list(self.choices),
            'trivia': self.trivia,
        }


@dataclass
class AnswerResult:
    correct: bool
    fun_fact: str

    def to_dict(self):
        return {'correct': self.correct, 'fun_fact': self.fun_fact}
