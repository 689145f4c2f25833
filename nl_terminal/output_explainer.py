"""Canned explanations for command output."""

import asyncio

SUCCESS_EXPLANATION = "Command executed successfully. The output shows the expected results."

# Checked in order, first substring found in the output wins
ERROR_EXPLANATIONS = (
    ("permission denied",
     "This error means you don't have sufficient permissions to perform this operation. "
     "You may need to use sudo (with caution) or change file permissions."),
    ("not found",
     "The command or file was not found. Check that the name is spelled correctly "
     "and the file exists in the specified location."),
    ("No such file",
     "The specified file or directory doesn't exist. Verify the path and filename are correct."),
)


class MockExplainer:
    """Explains command output using fixed templates."""

    def __init__(self, delay: float = 0.3):
        self.delay = delay

    async def explain(self, command: str, output: str, is_error: bool) -> str:
        """
        Explain what a command's output means.

        Args:
            command: The command that was run.
            output: Its output (stderr on failure).
            is_error: Whether the command failed.

        Returns:
            Explanation text.
        """
        if self.delay > 0:
            await asyncio.sleep(self.delay)

        if not is_error:
            return SUCCESS_EXPLANATION

        for needle, explanation in ERROR_EXPLANATIONS:
            if needle in output:
                return explanation
        return f"This command encountered an error. The output suggests: {output[:100]}..."
