"""Tests for -object types."""

from pathlib import Path

from queso.machine import Machine
from queso.numa import Node
from queso.objects import (
    HostMemoryPolicy,
    IOThread,
    MemoryBackend,
    Object,
    Secret,
    SecretFormat,
    TLSCredentials,
    TLSEndpoint,
    rng_builtin,
    rng_egd,
    rng_random,
    tls_cipher_suites,
)
from queso.vnc import VNC

# ============================================================================
# Memory backends
# ============================================================================


class TestMemoryBackend:
    """Tests for memory-backend-* objects."""

    def test_ram(self) -> None:
        backend = MemoryBackend.ram("mem0", "2G").toggle_prealloc(True).toggle_merge(False)
        assert backend.args_string() == "-object memory-backend-ram,id=mem0,size=2G,prealloc=on,merge=off"

    def test_file(self, tmp_path: Path) -> None:
        backend = MemoryBackend.file("mem1", "1G", tmp_path / "guest.ram").toggle_share(True).toggle_discard_data(True)
        assert backend.args() == [
            "-object",
            f"memory-backend-file,id=mem1,size=1G,mem-path={tmp_path / 'guest.ram'},share=on,discard-data=on",
        ]

    def test_memfd_hugetlb(self) -> None:
        backend = MemoryBackend.memfd("mem2", "4G").toggle_hugetlb(True).set_hugetlb_size("2M").toggle_seal(False)
        assert backend.args_string() == (
            "-object memory-backend-memfd,id=mem2,size=4G,hugetlb=on,hugetlbsize=2M,seal=off"
        )

    def test_host_nodes_and_policy(self) -> None:
        backend = MemoryBackend.ram("m", "1G").set_host_nodes(0, "2-3").set_policy(HostMemoryPolicy.BIND)
        assert backend.args_string() == "-object memory-backend-ram,id=m,size=1G,host-nodes=0,2-3,policy=bind"

    def test_referenced_by_numa_and_machine(self) -> None:
        """The object's id is what -numa and -machine point at."""
        backend = MemoryBackend.ram("pc.ram", "2G")
        assert Node(0).set_memory_device(backend.id).args_string() == "-numa node,nodeid=0,memdev=pc.ram"
        assert Machine("q35").set_memory_backend(backend.id).args_string() == "-machine q35,memory-backend=pc.ram"


# ============================================================================
# Secrets and TLS
# ============================================================================


class TestSecret:
    """Tests for secret objects."""

    def test_inline(self) -> None:
        assert Secret.from_data("sec0", "letmein").args_string() == "-object secret,id=sec0,data=letmein,format=raw"

    def test_file_encrypted(self) -> None:
        secret = Secret.from_file("sec1", "/run/secret.b64", SecretFormat.BASE64).set_encryption("master", "dGVzdA==")
        assert secret.args_string() == (
            "-object secret,id=sec1,file=/run/secret.b64,format=base64,keyid=master,iv=dGVzdA=="
        )

    def test_referenced_by_vnc(self) -> None:
        secret = Secret.from_file("vncpass", "/run/vnc.pass")
        vnc = VNC("localhost:0").set_password_secret(secret.id)
        assert "password-secret=vncpass" in vnc.args_string()


class TestTLSCredentials:
    """Tests for tls-creds-* objects."""

    def test_x509_server(self) -> None:
        creds = TLSCredentials.x509("tls0", TLSEndpoint.SERVER, "/etc/pki/qemu").toggle_verify_peer(True)
        assert creds.args_string() == (
            "-object tls-creds-x509,id=tls0,endpoint=server,dir=/etc/pki/qemu,verify-peer=on"
        )

    def test_x509_key_password(self) -> None:
        creds = TLSCredentials.x509("tls0", TLSEndpoint.CLIENT, "/pki").set_password_secret("sec0")
        assert creds.args_string() == "-object tls-creds-x509,id=tls0,endpoint=client,dir=/pki,passwordid=sec0"

    def test_anonymous_without_directory(self) -> None:
        creds = TLSCredentials.anonymous("tls1", TLSEndpoint.CLIENT)
        assert creds.args() == ["-object", "tls-creds-anon,id=tls1,endpoint=client"]

    def test_psk(self) -> None:
        creds = TLSCredentials.psk("tls2", TLSEndpoint.CLIENT, "/pki/psk").set_username("qemu")
        assert creds.args_string() == "-object tls-creds-psk,id=tls2,endpoint=client,dir=/pki/psk,username=qemu"

    def test_cipher_suites(self) -> None:
        assert tls_cipher_suites("ciphers0", "@SYSTEM").args_string() == (
            "-object tls-cipher-suites,id=ciphers0,priority=@SYSTEM"
        )


# ============================================================================
# RNG and iothreads
# ============================================================================


class TestRNG:
    """Tests for rng-* objects."""

    def test_builtin(self) -> None:
        assert rng_builtin("rng0").args() == ["-object", "rng-builtin,id=rng0"]

    def test_random_default_source(self) -> None:
        assert rng_random("rng0").args_string() == "-object rng-random,id=rng0"

    def test_random_file(self) -> None:
        assert rng_random("rng0", "/dev/hwrng").args_string() == "-object rng-random,id=rng0,filename=/dev/hwrng"

    def test_egd(self) -> None:
        assert rng_egd("rng1", "chr0").args_string() == "-object rng-egd,id=rng1,chardev=chr0"


class TestIOThread:
    """Tests for iothread objects."""

    def test_polling(self) -> None:
        thread = IOThread("io0").set_poll_max_ns(32768).set_poll_grow(2).set_poll_shrink(0).set_aio_max_batch(16)
        assert thread.args_string() == (
            "-object iothread,id=io0,poll-max-ns=32768,poll-grow=2,poll-shrink=0,aio-max-batch=16"
        )

    def test_thread_pool(self) -> None:
        assert IOThread("io1").set_thread_pool(1, 8).args_string() == (
            "-object iothread,id=io1,thread-pool-min=1,thread-pool-max=8"
        )

    def test_generic_object_id(self) -> None:
        assert Object("authz-simple", "authz0").set_property("identity", "CN=client").id == "authz0"
