"""User-creatable objects (`-object type,id=...`).

Objects are referenced by id from other options: memory backends from
`-numa node,memdev=` and `-machine memory-backend=`, secrets from
`password-secret=`, TLS credentials from `tls-creds=`, RNG backends from
`virtio-rng` devices and iothreads from block devices.

    >>> MemoryBackend.ram("mem0", "2G").toggle_prealloc(True).args_string()
    '-object memory-backend-ram,id=mem0,size=2G,prealloc=on'
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Self

from queso.options import Entity
from queso.properties import render_value


class ObjectType(str, Enum):
    MEMORY_BACKEND_RAM = "memory-backend-ram"
    MEMORY_BACKEND_FILE = "memory-backend-file"
    MEMORY_BACKEND_MEMFD = "memory-backend-memfd"
    SECRET = "secret"
    TLS_CREDS_ANON = "tls-creds-anon"
    TLS_CREDS_PSK = "tls-creds-psk"
    TLS_CREDS_X509 = "tls-creds-x509"
    TLS_CIPHER_SUITES = "tls-cipher-suites"
    RNG_BUILTIN = "rng-builtin"
    RNG_RANDOM = "rng-random"
    RNG_EGD = "rng-egd"
    IOTHREAD = "iothread"


class Object(Entity):
    """Object of the given type; the id is always the first property."""

    def __init__(self, object_type: ObjectType | str, object_id: str) -> None:
        super().__init__("object", render_value(object_type))
        self.set_property("id", object_id)

    @property
    def id(self) -> str:
        prop = self.get_property("id")
        return prop.string_value() if prop else ""


# =============================================================================
# Memory backends
# =============================================================================


class HostMemoryPolicy(str, Enum):
    DEFAULT = "default"
    PREFERRED = "preferred"
    BIND = "bind"
    INTERLEAVE = "interleave"


class MemoryBackend(Object):
    """Guest RAM region backing a NUMA node, DIMM or the whole machine."""

    def __init__(self, object_type: ObjectType, object_id: str, size: str) -> None:
        super().__init__(object_type, object_id)
        self.set_property("size", size)

    @classmethod
    def ram(cls, object_id: str, size: str) -> MemoryBackend:
        return cls(ObjectType.MEMORY_BACKEND_RAM, object_id, size)

    @classmethod
    def file(cls, object_id: str, size: str, mem_path: str | os.PathLike[str]) -> MemoryBackend:
        """Backed by a file or hugetlbfs mount at mem_path."""
        return cls(ObjectType.MEMORY_BACKEND_FILE, object_id, size).set_property("mem-path", mem_path)

    @classmethod
    def memfd(cls, object_id: str, size: str) -> MemoryBackend:
        """Anonymous memfd memory, shareable with vhost-user processes."""
        return cls(ObjectType.MEMORY_BACKEND_MEMFD, object_id, size)

    def toggle_share(self, enabled: bool) -> Self:
        return self.set_property("share", enabled)

    def toggle_merge(self, enabled: bool) -> Self:
        """KSM page merging for this region."""
        return self.set_property("merge", enabled)

    def toggle_dump(self, enabled: bool) -> Self:
        """Include the region in core dumps."""
        return self.set_property("dump", enabled)

    def toggle_prealloc(self, enabled: bool) -> Self:
        return self.set_property("prealloc", enabled)

    def set_host_nodes(self, *nodes: int | str) -> Self:
        """Host NUMA nodes, as single ids or "first-last" ranges."""
        return self.set_property("host-nodes", ",".join(str(node) for node in nodes))

    def set_policy(self, policy: HostMemoryPolicy) -> Self:
        return self.set_property("policy", policy)

    def toggle_discard_data(self, enabled: bool) -> Self:
        """file backend: drop the contents on exit instead of writing them back."""
        return self.set_property("discard-data", enabled)

    def set_align(self, alignment: str) -> Self:
        return self.set_property("align", alignment)

    def toggle_pmem(self, enabled: bool) -> Self:
        """file backend: mem-path is persistent memory."""
        return self.set_property("pmem", enabled)

    def toggle_read_only(self, enabled: bool) -> Self:
        return self.set_property("readonly", enabled)

    def toggle_seal(self, enabled: bool) -> Self:
        return self.set_property("seal", enabled)

    def toggle_hugetlb(self, enabled: bool) -> Self:
        return self.set_property("hugetlb", enabled)

    def set_hugetlb_size(self, size: str) -> Self:
        return self.set_property("hugetlbsize", size)


# =============================================================================
# Secrets
# =============================================================================


class SecretFormat(str, Enum):
    RAW = "raw"
    BASE64 = "base64"


class Secret(Object):
    """Password or key material for other objects (`-object secret`)."""

    def __init__(self, object_id: str) -> None:
        super().__init__(ObjectType.SECRET, object_id)

    @classmethod
    def from_data(cls, object_id: str, data: str, data_format: SecretFormat = SecretFormat.RAW) -> Secret:
        """Secret inline on the command line, visible in the process list."""
        return cls(object_id).set_property("data", data).set_property("format", data_format)

    @classmethod
    def from_file(
        cls, object_id: str, path: str | os.PathLike[str], data_format: SecretFormat = SecretFormat.RAW
    ) -> Secret:
        return cls(object_id).set_property("file", path).set_property("format", data_format)

    def set_encryption(self, key_id: str, iv: str) -> Self:
        """Data is AES-256-CBC encrypted with secret key_id; iv is base64."""
        return self.set_property("keyid", key_id).set_property("iv", iv)


# =============================================================================
# TLS
# =============================================================================


class TLSEndpoint(str, Enum):
    CLIENT = "client"
    SERVER = "server"


class TLSCredentials(Object):
    """TLS credentials loaded from a directory of PEM files."""

    def __init__(
        self,
        object_type: ObjectType,
        object_id: str,
        endpoint: TLSEndpoint,
        directory: str | os.PathLike[str] | None = None,
    ) -> None:
        super().__init__(object_type, object_id)
        self.set_property("endpoint", endpoint)
        if directory is not None:
            self.set_property("dir", directory)

    @classmethod
    def anonymous(
        cls, object_id: str, endpoint: TLSEndpoint, directory: str | os.PathLike[str] | None = None
    ) -> TLSCredentials:
        """Anonymous Diffie-Hellman; directory holds dh-params.pem if any."""
        return cls(ObjectType.TLS_CREDS_ANON, object_id, endpoint, directory)

    @classmethod
    def psk(cls, object_id: str, endpoint: TLSEndpoint, directory: str | os.PathLike[str]) -> TLSCredentials:
        """Pre-shared keys read from keys.psk in directory."""
        return cls(ObjectType.TLS_CREDS_PSK, object_id, endpoint, directory)

    @classmethod
    def x509(cls, object_id: str, endpoint: TLSEndpoint, directory: str | os.PathLike[str]) -> TLSCredentials:
        """x509 certificates: ca-cert.pem plus server-/client- cert and key."""
        return cls(ObjectType.TLS_CREDS_X509, object_id, endpoint, directory)

    def toggle_verify_peer(self, enabled: bool) -> Self:
        return self.set_property("verify-peer", enabled)

    def set_username(self, username: str) -> Self:
        """psk client identity."""
        return self.set_property("username", username)

    def set_password_secret(self, secret_id: str) -> Self:
        """x509: secret decrypting the private key."""
        return self.set_property("passwordid", secret_id)

    def set_priority(self, priority: str) -> Self:
        """GnuTLS priority string overriding the default cipher list."""
        return self.set_property("priority", priority)


def tls_cipher_suites(object_id: str, priority: str) -> Object:
    return Object(ObjectType.TLS_CIPHER_SUITES, object_id).set_property("priority", priority)


# =============================================================================
# Random number generators
# =============================================================================


def rng_builtin(object_id: str) -> Object:
    return Object(ObjectType.RNG_BUILTIN, object_id)


def rng_random(object_id: str, filename: str | os.PathLike[str] | None = None) -> Object:
    """Entropy from a host device; QEMU defaults to /dev/urandom."""
    rng = Object(ObjectType.RNG_RANDOM, object_id)
    if filename is not None:
        rng.set_property("filename", filename)
    return rng


def rng_egd(object_id: str, chardev_id: str) -> Object:
    """Entropy from an EGD daemon behind a chardev."""
    return Object(ObjectType.RNG_EGD, object_id).set_property("chardev", chardev_id)


# =============================================================================
# IO threads
# =============================================================================


class IOThread(Object):
    def __init__(self, object_id: str) -> None:
        super().__init__(ObjectType.IOTHREAD, object_id)

    def set_poll_max_ns(self, nanoseconds: int) -> Self:
        """Busy-wait budget before sleeping; 0 disables polling."""
        return self.set_property("poll-max-ns", nanoseconds)

    def set_poll_grow(self, factor: int) -> Self:
        return self.set_property("poll-grow", factor)

    def set_poll_shrink(self, divisor: int) -> Self:
        return self.set_property("poll-shrink", divisor)

    def set_aio_max_batch(self, count: int) -> Self:
        return self.set_property("aio-max-batch", count)

    def set_thread_pool(self, minimum: int, maximum: int) -> Self:
        return self.set_property("thread-pool-min", minimum).set_property("thread-pool-max", maximum)

