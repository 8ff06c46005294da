"""Cache parsed AST to disk, JSON round-trip."""

from subtilde import parse
from subtilde.serialization import from_json, to_json

doc = parse("C~6~H~12~O~6~ is ~~not~~ *sugar*", plugins=["all"], source_file="notes.md")

json_str = to_json(doc)
restored = from_json(json_str)

print("Original == restored:", doc == restored)
print("JSON length:", len(json_str), "chars")
