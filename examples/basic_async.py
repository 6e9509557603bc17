#!/usr/bin/env python3
"""
Basic animated session showing the step stream of each BST operation.

This example demonstrates:
- Seeding a tree and animating insert, search, delete and traversals
- Attaching a plain callable as an extra consumer
- Reading the trace log and final status
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from bststepper import SequencerConfig, TreeSession


def print_step(event):
    node = f" [{event.node.value}]" if event.node is not None else ""
    print(f"  {event.kind.name:<20}{node} {event.message}")


async def main():
    """Animate a few operations at a quick pace."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    session = TreeSession(SequencerConfig(step_delay_ms=50, trailing_delay_ms=100))
    session.sequencer.add_consumer(print_step)
    session.seed([50, 30, 70, 20, 40, 60, 80])

    for label, action in [
        ("insert 45", session.insert(45)),
        ("search 60", session.search(60)),
        ("delete 50", session.delete(50)),
        ("inorder", session.traverse("inorder")),
        ("postorder", session.traverse("postorder")),
    ]:
        print(f"\n{label}:")
        outcome = await action
        print(f"  -> {outcome.status.value}, result={outcome.result!r}")

    print("\nTrace log (newest first):")
    for entry in session.trace.entries:
        print(f"  {entry.time_label} [{entry.level}] {entry.message}")
    print(f"\nStatus: {session.status}")


if __name__ == "__main__":
    asyncio.run(main())
