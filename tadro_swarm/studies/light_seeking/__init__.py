"""
Study: Light Seeking

A handful of Tadros, one light, three forces.

Questions to explore:
- Does goal-directedness make the group more or less stable?
- How does group size change the stability ratio?
- What does drag do to the approach?
"""
