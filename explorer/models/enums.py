# explorer/models/enums.py
from enum import Enum

class TopicRelation(str, Enum):
    """How a related topic connects to the one being explored."""
    PREREQUISITE = "prerequisite"
    EXTENSION = "extension"
    APPLICATION = "application"
    PARALLEL = "parallel"
    DEEPER = "deeper"

class QuestionKind(str, Enum):
    """Flavour of a follow-up question suggested alongside explore content."""
    CURIOSITY = "curiosity"
    MECHANISM = "mechanism"
    CAUSALITY = "causality"
    INNOVATION = "innovation"
    INSIGHT = "insight"

class Aspect(str, Enum):
    """Thematic focus used to diversify generated playground questions."""
    CORE_CONCEPTS = "core_concepts"
    APPLICATIONS = "applications"
    PROBLEM_SOLVING = "problem_solving"
    ANALYSIS = "analysis"
    CURRENT_TRENDS = "current_trends"

class MessageType(str, Enum):
    USER = "user"
    AI = "ai"
