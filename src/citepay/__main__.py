"""Main entry point for the citation payment terminal."""
import argparse
import logging
from typing import List, Optional

from .actions import CitationActions
from .clipboard import InMemoryClipboard
from .config import Config
from .errors import WorkRepositoryError
from .payments import HttpPaymentService, PaymentService, SimulatedPaymentService
from .repository import JsonWorkRepository
from .utils.input_validation import InputValidator
from .utils.logging_setup import setup_logging
from .workflow import PaymentWorkflow


def build_payment_service(delay: Optional[float] = None) -> PaymentService:
    """HTTP backend when PAYMENT_API_URL is set, simulated processor otherwise."""
    if Config.PAYMENT_API_URL:
        return HttpPaymentService(Config.PAYMENT_API_URL)
    return SimulatedPaymentService(delay=delay)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pay to cite a scholarly work")
    parser.add_argument("--works", default=Config.WORKS_FILE, help="JSON file of works")
    parser.add_argument("--work-id", help="Identifier of the work to cite (first work if omitted)")
    parser.add_argument("--delay", type=float, default=None, help="Simulated payment delay in seconds")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main program entry point."""
    args = parse_args(argv)
    setup_logging()

    try:
        repository = JsonWorkRepository(args.works)
        works = repository.list_works()
        if not works:
            print(f"No works found in {args.works}")
            return 1
        work = repository.fetch_work(args.work_id) if args.work_id else works[0]
    except WorkRepositoryError as e:
        logging.error(f"Could not load work: {e}")
        print(f"Could not load work: {e}")
        return 1

    workflow = PaymentWorkflow(build_payment_service(args.delay), clipboard=InMemoryClipboard())
    actions = CitationActions(work, workflow)
    validator = InputValidator()

    try:
        logging.info("Citation terminal started")
        print("===== Cite This Paper =====")
        print(work.title)

        while True:
            print("\nMenu:")
            print("1. View paper")
            print("2. View citation formats")
            print("3. Copy citation")
            print("4. Pay to cite")
            print("5. Export latest receipt")
            print("6. Exit")

            choice = validator.get_menu_choice(1, 6)
            if not choice:
                continue

            if choice == 1:
                actions.action_view_work()
            elif choice == 2:
                actions.action_view_citations()
            elif choice == 3:
                actions.action_copy_citation()
            elif choice == 4:
                actions.action_pay_to_cite()
            elif choice == 5:
                actions.action_export_receipt()
            elif choice == 6:
                break

    except KeyboardInterrupt:
        print("\nProgram terminated by user.")
    finally:
        logging.info("Citation terminal finished")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
