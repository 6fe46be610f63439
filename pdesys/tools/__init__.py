"""
Package containing several tools required in py-pdesys

.. autosummary::
   :nosignatures:

   config
   docstrings
   typing

.. codeauthor:: David Zwicker <david.zwicker@ds.mpg.de>
"""
