"""Cache compiled documents to disk — JSON round-trip."""

from versicle import parse
from versicle.serialization import from_json, to_dict, to_json

doc = parse("\\c 1 \\p \\v 1 Text \\nd LORD\\nd* here", book="GEN")

json_str = to_json(doc)
restored = from_json(json_str)

print("Original == restored:", doc == restored)
print("JSON length:", len(json_str), "chars")
print("Plain shape:", to_dict(doc))
