"""Thread safe, parse 1000 texts in parallel with one Markdown instance."""

from concurrent.futures import ThreadPoolExecutor

from subtilde import Markdown

md = Markdown(plugins=["all"])
texts = [f"Sample {i}: H~2~O~{i}~ with ~~{i}~~ struck" for i in range(1000)]

with ThreadPoolExecutor(max_workers=8) as ex:
    results = list(ex.map(md, texts))

print(f"Rendered {len(results)} texts in parallel")
print("First:", results[0])
print("Last:", results[-1])
