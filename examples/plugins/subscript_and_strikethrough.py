"""Subscript and strikethrough share the tilde; enable what you need via plugins."""

from subtilde import Markdown

both = Markdown(plugins=["subscript", "strikethrough"])
strike_only = Markdown(plugins=["strikethrough"])

sources = [
    "H~2~O",
    "~~deleted~~",
    "C~6~H~12~O~6~ is ~~not~~ a gas",
    "H~2 ~O",
    "~start of line~",
]

for source in sources:
    print(f"{source!r}")
    print("  subscript + strikethrough:", both(source))
    print("  strikethrough only:       ", strike_only(source))
