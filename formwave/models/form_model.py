import uuid
from sqlalchemy import Boolean, Column, String, Text, DateTime, func, ForeignKey, Integer, JSON
from sqlalchemy.orm import relationship
from formwave.config.database_config import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Form(Base):
    __tablename__ = "forms"

    id = Column(String(36), primary_key=True, default=_uuid, unique=True)

    user_id = Column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(32), nullable=False, default="survey")
    settings = Column(JSON, nullable=False, default=dict)
    # Bumped on every edit, compared when the editor sends expected_version
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    questions = relationship(
        "Question",
        back_populates="form",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Question.position",
    )
    submissions = relationship(
        "Submission",
        back_populates="form",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Question(Base):
    __tablename__ = "questions"

    id = Column(String(36), primary_key=True, default=_uuid, unique=True)

    form_id = Column(
        String(36),
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(500), nullable=False)
    type = Column(String(32), nullable=False)
    required = Column(Boolean, nullable=False, default=False)
    options = Column(JSON, nullable=False, default=list)
    position = Column(Integer, nullable=False, default=0)

    # Builder field type and presentation (placeholder, help text, default value, styles)
    field_type = Column(String(32), nullable=True)
    settings = Column(JSON, nullable=False, default=dict)

    form = relationship("Form", back_populates="questions")


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, default=_uuid, unique=True)

    form_id = Column(
        String(36),
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    submitted_at = Column(DateTime, server_default=func.now(), nullable=False)

    form = relationship("Form", back_populates="submissions")
    answers = relationship(
        "Answer",
        back_populates="submission",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Answer(Base):
    __tablename__ = "answers"

    id = Column(String(36), primary_key=True, default=_uuid, unique=True)

    submission_id = Column(
        String(36),
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    question_id = Column(
        String(36),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Raw text, or a JSON array of option strings for multiple choice
    value = Column(Text, nullable=False, default="")

    submission = relationship("Submission", back_populates="answers")
