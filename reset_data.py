"""
reset_data.py
-------------
Utility script to clear all stored collections (bookings, fleet, ledger, users...)
from the local data.pkl file.

This script is designed for development and testing purposes.
The default superadmin and settings are recreated the next time the store starts.

Usage:
    $ python reset_data.py

After running this script, you can repopulate sample data by executing:
    $ python seeds.py
"""

from rentdesk.models.store import Store


def main():
    """Clear every collection in the persistent store and save the empty state to disk."""
    store = Store.instance()
    store.clear()

    print("✅ data.pkl has been successfully cleared.")
    print("💡 Tip: Run `python seeds.py` to regenerate demo data.")


if __name__ == "__main__":
    main()
