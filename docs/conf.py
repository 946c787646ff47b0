# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

import chanpipe

# -- Project information -----------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#project-information

project = 'chanpipe'
copyright = '2024-, chanpipe authors'
author = 'chanpipe authors'
version = str(chanpipe.__version__)

today_fmt = '%b %d %Y'

# -- General configuration ---------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#general-configuration

# See numpydoc documentation for a numpy-style docstring style guide.

extensions = [
    "numpydoc",
    'sphinx.ext.autodoc',
    'sphinx.ext.viewcode',
    ]

# Disable autosummary stuff, which is enabled by numpydoc by default.
numpydoc_show_class_members = False
numpydoc_show_inherited_class_members = False


autodoc_default_options = {
    'members': True,
    'undoc-members': True,
    'special-members': '__init__, __iter__, __next__',
    'member-order': 'bysource',
    'show-inheritance': True,
}
autodoc_class_signature = 'separated'
autodoc_typehints = 'signature'

exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']


# -- Options for HTML output -------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#options-for-html-output

html_theme = 'pydata_sphinx_theme'
