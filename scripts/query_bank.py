import sys

from memory_bank.server import format_reports, format_search_results
from memory_bank.session import MemoryBank


def main() -> None:
    """Search an existing memory bank folder and print its consistency report."""
    if len(sys.argv) < 3:
        print("usage: query_bank.py <memory-bank-dir> <query>")
        raise SystemExit(2)
    bank = MemoryBank(directory=sys.argv[1])
    query = " ".join(sys.argv[2:])
    print(format_search_results(query, bank.search(query)))
    print()
    print(format_reports(bank.analyze()))


if __name__ == "__main__":
    main()
