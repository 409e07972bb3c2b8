"""StoryFold: LLM-assisted writing pipeline with a supervised refinement loop."""

__version__ = "0.3.0"
