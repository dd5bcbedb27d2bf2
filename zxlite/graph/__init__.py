from .diagram import Diagram, new_diagram
from .scalar import Scalar
