"""
Services layer - business logic for RoadFix.

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Only the lifecycle coordinator writes report status, assignment and
  team availability
- Stores translate Firestore failures into StoreError
"""
