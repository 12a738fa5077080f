"""RevisedLM: AI-generated quizzes for revision."""
