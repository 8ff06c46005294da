"""Parsing subsystem for subtilde.

- line: escape/entity decoding and the LineBuffer view rules read
- charsets: character classes used by the scanners
- inline: rule table, delimiter runs, and the InlineParser

"""
