"""Pipeline stages — mapping, packing.

Each stage consumes the previous stage's output in order and never
re-sorts it.  The stages in order:

  mapping  — resolve each drawing device to a layout block and module count
  packer   — place mapped devices on DIN rails, splitting across rows
  run      — compose both stages with issue reporting for one layout run
"""
