"""Input validation utilities."""
from typing import List, Optional

from .error_handling import user_input_handler


class InputValidator:
    """Input validation and user interaction."""

    @staticmethod
    @user_input_handler
    def get_menu_choice(min_val: int = 1, max_val: int = 6) -> Optional[int]:
        """Get and validate menu choice from user."""
        choice = input(f"Choice ({min_val}-{max_val}): ").strip()
        if choice.isdigit():
            num = int(choice)
            if min_val <= num <= max_val:
                return num
        print(f"Please enter a number between {min_val} and {max_val}")
        return None

    @staticmethod
    def choose_option(prompt: str, options: List[str], default: int = 0) -> int:
        """Pick one of ``options`` by number; Enter keeps the default index."""
        print(prompt)
        for i, option in enumerate(options, 1):
            marker = " (default)" if i - 1 == default else ""
            print(f"{i}. {option}{marker}")
        while True:
            choice = input(f"Choice (1-{len(options)}): ").strip()
            if not choice:
                return default
            if choice.isdigit() and 1 <= int(choice) <= len(options):
                return int(choice) - 1
            print(f"Please enter a number between 1 and {len(options)}")

    @staticmethod
    def get_text(prompt: str) -> str:
        """Free text; may be empty."""
        return input(prompt).strip()

    @staticmethod
    def confirm_action(prompt: str) -> bool:
        """Get yes/no confirmation from user."""
        response = input(f"{prompt} (y/n): ").strip().lower()
        return response in ['y', 'yes']
