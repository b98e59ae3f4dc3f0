"""learnpath - Topic-based learning platform with lesson timelines, quizzes and a tutor chat."""

__version__ = "0.1.0"
