"""
pdflens - Read PDF files over the Model Context Protocol.

Tools resolve every path against the client's workspace roots before reading:
- pdflens_get_pdf_num_pages
- pdflens_read_pdf_as_text
- pdflens_read_pdf_page_as_image
- pdflens_read_pdf_as_images
- pdflens_list_roots
"""

__version__ = "0.1.0"
