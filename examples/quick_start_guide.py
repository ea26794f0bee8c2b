#!/usr/bin/env python3
"""
Quick Start Guide for the Lenient Markup Parser.

This example walks through one-shot parsing, token inspection, the two
assembly modes and diagnostics on malformed input.
"""

import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lenient_markup import MarkupParser, ParserConfig, parse, tokenize
from lenient_markup.tree import Element, walk


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - Lenient Markup Parser")
    print("=" * 45)

    # Step 1: Parse a buffer
    print("\n📄 Step 1: Parsing Markup")
    print("-" * 30)

    result = parse('<book id="123" genre=fiction><title>My Book</title></book>')
    [book] = result.elements

    print(f"✅ Parse success: {result.success}")
    print(f"📖 Root element: {book.name} (id={book.get_attribute('id')})")
    print(f"📏 Max depth: {result.max_depth}")

    # Step 2: Inspect tokens
    print("\n🔍 Step 2: Tokens")
    print("-" * 30)

    for token in tokenize("<a href='/x'>link</a>"):
        print(f"  {token.kind.name:<16} {token.value!r:<10} @ {token.start.line}:{token.start.column}")

    # Step 3: Walk the forest
    print("\n🧭 Step 3: Walking the Forest")
    print("-" * 30)

    for node, depth in walk(result.nodes):
        label = f"<{node.name}>" if isinstance(node, Element) else repr(node.text)
        print(f"  {'  ' * depth}{label}")

    print(f"\n🎉 Quick start complete!")


def assembly_modes_example():
    """Example comparing the lenient and structured assembly modes."""

    print("\n\n🔄 ASSEMBLY MODES EXAMPLE")
    print("=" * 40)

    source = "<p>one</p><p>two</p>"
    modes = [
        (ParserConfig.lenient(), "Closing tags ignored"),
        (ParserConfig.structured(), "Closing tags end the innermost element"),
    ]

    for config, description in modes:
        result = parse(source, config)
        print(f"\n📋 {config.name} ({description}):")
        print(f"  Roots: {len(result.nodes)}")
        print(f"  Max depth: {result.max_depth}")


def diagnostics_example():
    """Example showing diagnostics for malformed input."""

    print("\n\n⚠️  DIAGNOSTICS EXAMPLE")
    print("=" * 35)

    parser = MarkupParser("<div class='open>text</div><p =x>", correlation_id="demo-1")
    result = parser.parse()

    print(f"✅ Parse success: {result.success}")
    for diagnostic in result.diagnostics:
        print(f"  - {diagnostic.severity.name}: {diagnostic.message}")

    print("\n📊 Summary:")
    print(json.dumps(result.summary(), indent=2))


def main():
    """Main function."""
    try:
        quick_start_example()
        assembly_modes_example()
        diagnostics_example()

        print(f"\n✅ All examples completed successfully!")
        return 0

    except Exception as e:
        print(f"\n❌ Example failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
