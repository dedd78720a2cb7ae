"""Writer assessment engine: rubric scoring, AI-likelihood, plagiarism and authorship checks."""

__version__ = "0.1.0"
