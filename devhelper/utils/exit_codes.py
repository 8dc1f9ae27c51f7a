"""Centralized exit codes for the dev-helper CLI."""


class ExitCodes:
    """Standard exit codes for dev-helper CLI commands.

    Diagnostic commands (setup, explain, tools) always finish with SUCCESS,
    whatever they find, so the tool can sit in any pipeline without breaking it.
    """

    SUCCESS = 0

    COMMAND_BLOCKED = 1

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - diagnostic run completed",
            cls.COMMAND_BLOCKED: "Command would be blocked by the safety gate",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
