"""
Face Detection Module
MediaPipe Face Mesh landmark source for one or more faces
"""

import cv2
import mediapipe as mp

from .config import MAX_NUM_FACES, MIN_DETECTION_CONFIDENCE, MIN_TRACKING_CONFIDENCE

mp_face_mesh = mp.solutions.face_mesh


class FaceDetector:
    """
    MediaPipe Face Mesh detector producing face detection batches.

    A batch is a list with one landmark set per detected face; each
    landmark set is a list of (x, y) pixel coordinates indexed by
    Face Mesh point id.
    """

    def __init__(self, max_num_faces=MAX_NUM_FACES):
        """
        Initialize face detector.

        Args:
            max_num_faces: Upper bound of faces tracked per frame (> 1 to count extra faces)
        """
        self.face_mesh = mp_face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=max_num_faces,
            refine_landmarks=True,
            min_detection_confidence=MIN_DETECTION_CONFIDENCE,
            min_tracking_confidence=MIN_TRACKING_CONFIDENCE,
        )

    def detect(self, frame):
        """
        Detect all faces in a frame.

        Args:
            frame: BGR image frame

        Returns:
            List of landmark sets (possibly empty)
        """
        h, w = frame.shape[:2]
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        results = self.face_mesh.process(rgb)

        if not results.multi_face_landmarks:
            return []

        return [
            [(lm.x * w, lm.y * h) for lm in face.landmark]
            for face in results.multi_face_landmarks
        ]

    def close(self):
        self.face_mesh.close()
