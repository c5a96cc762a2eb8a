"""
ERP Modules (``erp_modules``).

Business modules built on top of ``erp_kernel`` and ``erp_engines``:

- ``banking``         -- payment allocation amounts
- ``handling_units``  -- HU model, packing-instruction catalog, transfer
                         service and the HU transform process
- ``notifications``   -- per-role notification group configuration

Modules import from the kernel and the engines, never the reverse.
"""
