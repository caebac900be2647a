"""
Modular Exam Proctor

Webcam attentiveness monitoring, one module per concern:
- Geometric feature extraction
- Debounced behavior detectors (looking away, eyes closed, multiple faces)
- Warning escalation
- Window visibility (tab switch) monitoring
- Camera, landmark source and visualization
"""

__version__ = "1.0.0"
