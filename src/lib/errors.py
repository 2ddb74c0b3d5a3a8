"""
Parse and structure errors

ParsingError is raised for malformed markup in strict mode and by tag
factories that reject their arguments. It keeps the offending token spans so
the message can point at them:

    Unclosed tag encountered; bold is not closed, because red was closed first.
    	<red><bold>hi</red>
    	^~~~^^~~~~^  ^~~~~^
"""

from typing import Optional, Sequence

from ..models.parser import Token


class ParsingError(SyntaxError):
    """Raised when markup cannot be parsed"""

    def __init__(
        self,
        message: str,
        original_text: Optional[str] = None,
        tokens: Sequence[Token] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.original_text = original_text
        self.tokens = list(tokens)

    def arrow(self) -> str:
        """
        Build the marker line for the error tokens

        Each token span is drawn as ^~~~^ under the source text.
        """
        if not self.tokens:
            return ""
        chars = [" "] * max(t.end_index for t in self.tokens)
        for token in self.tokens:
            if token.end_index <= token.start_index:
                chars[token.start_index:token.start_index + 1] = ["^"]
                continue
            chars[token.start_index] = "^"
            for i in range(token.start_index + 1, token.end_index - 1):
                chars[i] = "~"
            chars[token.end_index - 1] = "^"
        return "".join(chars).rstrip()

    def __str__(self) -> str:
        from ..config import appsettings

        if self.original_text is None or not appsettings.error_context:
            return self.message
        text = f"{self.message}\n\t{self.original_text}"
        if self.tokens:
            text += f"\n\t{self.arrow()}"
        return text


class StructureError(ValueError):
    """Raised when a component would become its own hover payload"""
    pass
