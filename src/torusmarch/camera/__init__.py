from torusmarch.camera.camera3d import Camera3D

__all__ = [
    "Camera3D",
]
