"""Parse and render a subscript in 3 lines, zero deps."""

from subtilde import parse, render

doc = parse("H~2~O is **water**", plugins=["subscript"])
html = render(doc)
print(html)
