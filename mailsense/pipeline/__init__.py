"""Address analysis pipeline: syntax -> normalizer -> classifier -> scoring.

Submodules are imported directly; this package stays import-free because
mailsense.core.state depends on pipeline.tables.
"""
