"""Common literal values used across docc_pages.

These constants keep asset paths and markup identifiers centralized so
templates, generators, and tests can import the same values without
drifting. Intended for internal use within the docc_pages package.

Examples
--------
>>> from docc_pages import _constants
>>> _constants.STYLESHEET_PATH
'css/main.css'
>>> _constants.SEARCH_SCRIPT_PATHS[-1]
'js/search.js'
"""

STYLESHEET_PATH = "css/main.css"
SEARCH_SCRIPT_PATHS = ("js/lunr.min.js", "js/search.js")
HOME_PAGE = "index.html"
DEFAULT_LINK_SCHEME = "doc"
DEFAULT_INTERFACE_LANGUAGE = "swift"
DEFAULT_SITE_NAME = "Documentation"
DEFAULT_FOOTER = "Generated from a compiled documentation archive."
APPEARANCE_STORAGE_KEY = "docc-pages-appearance"
APPEARANCE_CHOICES = ("light", "dark", "auto")
