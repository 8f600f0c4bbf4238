"""Compile a USFM fragment in 3 lines — zero config, zero deps."""

from versicle import parse

doc = parse("\\id GEN\n\\c 1\n\\p\n\\v 1 In the beginning, God\\f + \\ft Elohim\\f* created.")
print(doc.text)
for block in doc.styling:
    print(f"{block.kind:>4} [{block.min}, {block.max})", getattr(block, "ref", ""))
