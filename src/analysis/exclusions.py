"""Name-based exclusion rules applied before any network lookup.

These checks are advisory: they only save requests for packages that
obviously cannot run on Android or iOS. Anything they miss still resolves
to "not available" downstream.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Tuple

from wheels.naming import normalize_name


class ExclusionReason(Enum):
    """Why a package was dropped from mobile checking."""

    DEPRECATED = "Deprecated"
    GPU = "GPU/CUDA"
    WINDOWS = "Windows-only"
    NON_MOBILE = "Non-mobile"


DEPRECATED_PACKAGES = frozenset({
    "beautifulsoup",
    "bs4",
    "distribute",
    "django-social-auth",
    "nose",
    "pep8",
    "pycrypto",
    "pypular",
    "sklearn",
    "subprocess32",
})

NON_MOBILE_PACKAGES = frozenset({
    # CUDA is not available on Android or iOS
    "cuda-bindings",
    "cupy-cuda11x",
    "cupy-cuda12x",
    "jax-cuda12-pjrt",
    "jax-cuda12-plugin",
    "nvidia-cublas-cu11",
    "nvidia-cublas-cu12",
    "nvidia-cuda-cupti-cu11",
    "nvidia-cuda-cupti-cu12",
    "nvidia-cuda-nvcc-cu12",
    "nvidia-cuda-nvrtc-cu11",
    "nvidia-cuda-nvrtc-cu12",
    "nvidia-cuda-runtime-cu11",
    "nvidia-cuda-runtime-cu12",
    "nvidia-cudnn-cu11",
    "nvidia-cudnn-cu12",
    "nvidia-cufft-cu11",
    "nvidia-cufft-cu12",
    "nvidia-cufile-cu12",
    "nvidia-curand-cu11",
    "nvidia-curand-cu12",
    "nvidia-cusolver-cu11",
    "nvidia-cusolver-cu12",
    "nvidia-cusparse-cu11",
    "nvidia-cusparse-cu12",
    "nvidia-cusparselt-cu12",
    "nvidia-modelopt-core",
    "nvidia-modelopt",
    "nvidia-nccl-cu11",
    "nvidia-nccl-cu12",
    "nvidia-nvshmem-cu12",
    "nvidia-nvtx-cu11",
    "nvidia-nvtx-cu12",
    "sgl-kernel",
    # Intel-only runtimes
    "intel-cmplr-lib-ur",
    "intel-openmp",
    "mkl",
    "tensorflow-intel",
    # Needs subprocesses
    "multiprocess",
    # Windows bindings
    "pywin32",
    "pywinpty",
    "windows-curses",
    "pywinauto",
    "winshell",
    "wmi",
    "comtypes",
    "pythonnet",
    "pywin32-ctypes",
    "winreg",
    "win32-setctime",
})

GPU_PATTERNS = (
    "cuda", "cupy", "nvidia-", "nvcc", "nccl", "cupti", "nvtx",
    "cublas", "cudnn", "cufft", "curand", "cusolver", "cusparse",
    "nvrtc", "nvjitlink", "tensorrt", "-gpu", "-cuda",
    "jax-cuda", "torch-cuda", "tensorflow-gpu", "paddlepaddle-gpu",
    "onnxruntime-gpu", "mxnet-cu", "triton",
)
GPU_PREFIX = "gpu-"

WINDOWS_PATTERNS = (
    "pywin", "win32", "winreg", "wmi", "windows-", "pywinauto",
    "winshell", "pywinusb", "win-", "-win32", "msvc", "comtypes",
    "pywinpty", "windows-curses", "winsys", "winappdbg",
)


def is_gpu_package(name: str) -> bool:
    """Return True if the name looks like a GPU/accelerator package."""
    lowered = name.lower()
    if lowered.startswith(GPU_PREFIX):
        return True
    return any(pattern in lowered for pattern in GPU_PATTERNS)


def is_windows_package(name: str) -> bool:
    """Return True if the name looks like a Windows-only package."""
    lowered = name.lower()
    return any(pattern in lowered for pattern in WINDOWS_PATTERNS)


def is_known_unsupported(name: str) -> bool:
    """Exact-name checks only: deprecated or explicitly non-mobile."""
    normalized = normalize_name(name)
    return normalized in DEPRECATED_PACKAGES or normalized in NON_MOBILE_PACKAGES


def exclusion_reason(name: str) -> Optional[ExclusionReason]:
    """Return the first matching exclusion reason, or None if the package is a candidate.

    Checks run in order: deprecated set, GPU patterns, Windows patterns,
    non-mobile set.
    """
    normalized = normalize_name(name)
    if normalized in DEPRECATED_PACKAGES:
        return ExclusionReason.DEPRECATED
    if is_gpu_package(normalized):
        return ExclusionReason.GPU
    if is_windows_package(normalized):
        return ExclusionReason.WINDOWS
    if normalized in NON_MOBILE_PACKAGES:
        return ExclusionReason.NON_MOBILE
    return None


def is_excluded(name: str) -> bool:
    """Return True if any exclusion rule matches."""
    return exclusion_reason(name) is not None


def partition_packages(
    names: Iterable[str],
) -> Tuple[List[str], List[Tuple[str, ExclusionReason]]]:
    """Split names into (candidates, excluded-with-reason), preserving order."""
    candidates: List[str] = []
    excluded: List[Tuple[str, ExclusionReason]] = []
    for name in names:
        reason = exclusion_reason(name)
        if reason is None:
            candidates.append(name)
        else:
            excluded.append((name, reason))
    return candidates, excluded
