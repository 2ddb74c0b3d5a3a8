"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from .nodes import RootNode


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ParsedMessage:
    """
    One message of the input file after parsing

    Attributes:
        line_number: Line of the message in the input file
        source: The message as written
        tree: Element tree, None if parsing failed
        error: Error text, None if parsing succeeded
    """
    line_number: int
    source: str
    tree: Optional['RootNode'] = None
    error: Optional[str] = None


@dataclass
class ProgramState:
    """
    Central state container for the rendering pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, placeholders,
          strict, highlight, outputSubdir
        - env_check: inputSourceFile, placeholdersFile, resultOutputdir, envOK
        - source_parse: parsedMessages
        - messages_render: renderResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the message file
        outputdir: Base output directory
        verbosity: Logging verbosity level (1-3)
        inputFile: Message file, one message per line (relative to inputdir)
        placeholders: Optional YAML placeholder file (relative to inputdir)
        strict: Parse in strict mode
        highlight: Also write a syntax-highlighted HTML view of the source
        outputSubdir: Subdirectory within outputdir for output
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the message file
        placeholdersFile: Resolved path to the placeholder file
        resultOutputdir: Final output directory (outputdir + outputSubdir)
        parsedMessages: Parsed messages in file order
        renderResult: Render results (output_file, message_count, failures)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    placeholders: Optional[str] = field(default=None)
    strict: bool = field(default=False)
    highlight: bool = field(default=False)
    outputSubdir: str = field(default=".")

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    placeholdersFile: Optional[Path] = field(default=None)
    resultOutputdir: Path = field(default=Path("/"))
    parsedMessages: Optional[List[ParsedMessage]] = field(default=None)
    renderResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, placeholders, etc.)
            inputdir: Directory containing the message file
            outputdir: Directory for rendered output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        import dataclasses

        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
        return cls(**{**filtered_options, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_parse,
            messages_render,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
