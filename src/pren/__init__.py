"""pren - A simple and ergonomic prompt engine.

Store reusable prompts as markdown files, compose them by reference and
render them with arguments. Rendered prompts can be copied to the
clipboard or sent straight to an LLM.
"""

__version__ = "0.1.0"
