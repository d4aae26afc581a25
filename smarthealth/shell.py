#!/usr/bin/env python3
"""
Smart Health console

Interactive menu loop over the patient, doctor and appointment services.
Every command runs to completion and prints its outcome before the next
menu is shown.
"""

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler

from .config import load_settings
from .records.models import ServiceResult
from .records.services import ClinicServices

MAIN_MENU = [
    ("1", "Patient Management"),
    ("2", "Doctor Management"),
    ("3", "Appointment Management"),
    ("4", "Exit"),
]

GOODBYE = "Thank you for using Smart Health Console App!"


class ClinicShell:
    def __init__(self, services: ClinicServices, console: Optional[Console] = None,
                 prompt: Optional[Callable[[str], str]] = None):
        self.services = services
        self.console = console or Console()
        self.prompt = prompt or self.console.input

    def ask(self, label: str) -> str:
        return self.prompt(f"{label}: ")

    def ask_int(self, label: str) -> int:
        # ValueError aborts the current command only.
        return int(self.ask(label).strip())

    def show(self, result: ServiceResult) -> None:
        style = "green" if result.ok else "red"
        self.console.print(result.message, style=style, markup=False)
        for line in result.lines:
            self.console.print(line, markup=False)

    def choose(self, title: str, options: List[Tuple[str, str]]) -> str:
        self.console.print(f"\n{title}", style="bold blue", markup=False)
        for key, text in options:
            self.console.print(f"{key}. {text}", markup=False)
        return self.ask("Choose an option").strip()

    def run(self) -> None:
        submenus = {
            "1": self.patient_menu,
            "2": self.doctor_menu,
            "3": self.appointment_menu,
        }
        try:
            while True:
                choice = self.choose("=== Smart Health Console App ===", MAIN_MENU)
                if choice == "4":
                    break
                if choice in submenus:
                    submenus[choice]()
                else:
                    self.console.print("Invalid option. Try again.", style="yellow")
        except EOFError:
            pass
        self.console.print(GOODBYE, style="bold")

    def submenu(self, title: str, actions: Dict[str, Tuple[str, Callable[[], ServiceResult]]]) -> None:
        options = [(key, text) for key, (text, _) in actions.items()]
        back = str(len(options) + 1)
        options.append((back, "Back"))
        while True:
            choice = self.choose(f"--- {title} ---", options)
            if choice == back:
                return
            if choice not in actions:
                self.console.print("Invalid option. Try again.", style="yellow")
                continue
            try:
                result = actions[choice][1]()
            except ValueError:
                self.console.print("Please enter a valid number.", style="red")
                continue
            self.show(result)

    def patient_menu(self) -> None:
        patients = self.services.patients
        self.submenu("Patient Management", {
            "1": ("Add Patient", lambda: patients.add(
                self.ask("Name"),
                self.ask_int("Age"),
                self.ask("Gender (Male/Female/Other)"),
                self.ask("Contact (10 digits)"),
            )),
            "2": ("Update Patient", lambda: patients.update(
                self.ask_int("Patient ID"),
                self.ask("New Name"),
                self.ask_int("New Age"),
                self.ask("New Gender"),
                self.ask("New Contact"),
            )),
            "3": ("Delete Patient", lambda: patients.delete(self.ask_int("Patient ID"))),
            "4": ("List Patients", patients.list),
        })

    def doctor_menu(self) -> None:
        doctors = self.services.doctors
        self.submenu("Doctor Management", {
            "1": ("Add Doctor", lambda: doctors.add(
                self.ask("Name"),
                self.ask("Specialization"),
                self.ask("Contact (10 digits)"),
            )),
            "2": ("Update Doctor", lambda: doctors.update(
                self.ask_int("Doctor ID"),
                self.ask("New Name"),
                self.ask("New Specialization"),
                self.ask("New Contact"),
            )),
            "3": ("Delete Doctor", lambda: doctors.delete(self.ask_int("Doctor ID"))),
            "4": ("List Doctors", doctors.list),
        })

    def appointment_menu(self) -> None:
        appointments = self.services.appointments
        self.submenu("Appointment Management", {
            "1": ("Schedule Appointment", lambda: appointments.add(
                self.ask_int("Patient ID"),
                self.ask_int("Doctor ID"),
                self.ask("Date (YYYY-MM-DD)"),
                self.ask("Time (HH:MM)"),
            )),
            "2": ("Update Appointment", lambda: appointments.update(
                self.ask_int("Appointment ID"),
                self.ask("New Date (YYYY-MM-DD)"),
                self.ask("New Time (HH:MM)"),
            )),
            "3": ("Cancel Appointment", lambda: appointments.delete(self.ask_int("Appointment ID"))),
            "4": ("List Appointments", appointments.list),
        })


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Smart Health clinic record manager")
    parser.add_argument("--data-dir", help="Directory holding the record files")
    parser.add_argument("--log-level", help="Logging level (default WARNING)")
    args = parser.parse_args(argv)

    settings = load_settings(data_dir=args.data_dir, log_level=args.log_level)
    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    console = Console()
    shell = ClinicShell(ClinicServices.from_settings(settings), console)
    try:
        shell.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
