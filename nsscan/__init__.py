"""Find Clojure namespace declarations in source trees and jars without loading them.

Modules:
- forms.py: Data types for read forms and a printer.
- reader.py: Reads top-level forms from a character stream.
- extract.py: Selects and normalises ``ns`` / ``in-ns`` forms.
- fs_scan.py: Scans single files, directory trees and archives.
- classpath.py: Resolves classpath entries and aggregates results.
- names.py: Namespace/path conversion and docstring extraction.
- model.py: Result models.
- summarize.py: Deterministic textual summaries of scan results.
"""

__all__ = [
	"forms",
	"reader",
	"extract",
	"fs_scan",
	"classpath",
	"names",
	"model",
	"summarize",
	"config",
	"errors",
]
