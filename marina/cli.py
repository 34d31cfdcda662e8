"""
Console Frontend for Marina

This is the line-oriented menu the harbour master works with.

DESIGN PRINCIPLES:
1. One key per command, first character of the input, any case
2. Every error becomes a one-line message; nothing ends the session
   except (X) or end of input
3. The data file is written exactly once, on the way out

The console reads and writes through injected streams so the whole loop
can be driven from tests.
"""

import argparse
import sys
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, TextIO

from pydantic import ValidationError

from marina.audit import configure_logging
from marina.config import get_settings
from marina.models.boat import BoatRecord, format_amount
from marina.orchestrator import MarinaSession, create_app_components
from marina.registry import RegistryError
from marina.storage import FileOpenError


MENU_PROMPT = "(I)nventory, (A)dd, (R)emove, (P)ayment, (M)onth, e(X)it : "
ADD_PROMPT = "Please enter the boat data in CSV format                 : "
NAME_PROMPT = "Please enter the boat name                               : "
AMOUNT_PROMPT = "Please enter the amount to be paid                       : "


def format_inventory_line(record: BoatRecord) -> str:
    """One row of the inventory listing."""
    return (
        f"{record.name:<20} {record.length:>2}' "
        f"{record.detail.describe()}"
        f"Owes ${format_amount(record.amount_owed):>8}"
    )


class MarinaConsole:
    """
    Interactive menu loop over a MarinaSession.

    Menu:
        (I)nventory  name-sorted listing with balances
        (A)dd        one line of boat data in CSV format
        (R)emove     a boat by name
        (P)ayment    against a boat's balance
        (M)onth      charge every boat one month of fees
        e(X)it       save and quit
    """

    def __init__(
        self,
        session: MarinaSession,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self._session = session
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr
        self._commands: dict[str, Callable[[], None]] = {
            "i": self.print_inventory,
            "a": self.add_boat,
            "r": self.remove_boat,
            "p": self.process_payment,
            "m": self.update_month,
        }

    def _write(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()

    def _read_line(self) -> Optional[str]:
        """Next input line without its newline, or None at end of input."""
        line = self._stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def _prompt(self, prompt: str) -> Optional[str]:
        self._write(prompt)
        return self._read_line()

    def run(self) -> int:
        """
        Run the session from load to save.

        Returns the process exit status (0 even when saving fails; the
        failure is reported on stderr).
        """
        report = self._session.start()
        if not report.opened:
            self._write(
                f"Could not open file {report.source} for reading. "
                "Starting with empty database.\n"
            )
        for problem in report.rejected:
            self._write(f"Skipped {problem}\n")

        self._write("Welcome to the Boat Management System\n")
        self._write("-------------------------------------\n\n")

        while True:
            entry = self._prompt(MENU_PROMPT)
            if entry is None:
                break
            option = entry.strip()
            if not option:
                continue

            choice = option[0].lower()
            if choice == "x":
                break

            command = self._commands.get(choice)
            if command is None:
                self._write(f"Invalid option {option}\n")
                continue
            command()

        self._write("\nExiting the Boat Management System\n")

        try:
            self._session.finish()
        except FileOpenError as e:
            self._stderr.write(f"{e}\n")
            self._stderr.flush()
        return 0

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def print_inventory(self) -> None:
        records = self._session.inventory()
        for record in records:
            self._write(format_inventory_line(record) + "\n")
        if records:
            total = self._session.registry.total_owed()
            self._write(f"Total owed ${format_amount(total):>8}\n")

    def add_boat(self) -> None:
        line = self._prompt(ADD_PROMPT)
        if line is None or not line.strip():
            return
        try:
            self._session.add_line(line)
        except RegistryError as e:
            self._write(f"{e}\n")

    def remove_boat(self) -> None:
        name = self._prompt(NAME_PROMPT)
        if name is None:
            return
        try:
            self._session.remove(name)
        except RegistryError as e:
            self._write(f"{e}\n")

    def process_payment(self) -> None:
        name = self._prompt(NAME_PROMPT)
        if name is None:
            return
        if self._session.registry.find(name) is None:
            self._write("No boat with that name\n")
            return

        amount_text = self._prompt(AMOUNT_PROMPT)
        if amount_text is None:
            return
        try:
            amount = Decimal(amount_text.strip())
        except InvalidOperation:
            self._write(f"Invalid amount {amount_text.strip()}\n")
            return

        try:
            self._session.pay(name, amount)
        except RegistryError as e:
            self._write(f"{e}\n")

    def update_month(self) -> None:
        self._session.accrue_month()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marina",
        description="Manage the boats kept at the marina.",
    )
    parser.add_argument(
        "data_file",
        help="Boat data file (e.g. BoatData.csv); created on exit if missing",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Process entry point. Returns the exit status."""
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        sys.stderr.write(f"Invalid configuration: {e}\n")
        return 1

    configure_logging(settings.log_level, settings.log_json)
    session = create_app_components(args.data_file, settings)
    return MarinaConsole(session).run()


if __name__ == "__main__":
    sys.exit(main())
