"""Cross-file symbol storage: the package name cache and the entity table."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple, Type, TypeVar

from ..logging import get_logger
from ..models import Entity, FunctionEntity, InterfaceEntity, StructEntity, TypeAliasEntity

logger = get_logger("symbols")

_E = TypeVar("_E", InterfaceEntity, StructEntity, FunctionEntity, TypeAliasEntity)

# Standard library import paths. The cache is seeded with them so that
# imports such as "net/http" never trigger a filesystem lookup.
STDLIB_PACKAGES: Tuple[str, ...] = (
    "archive/tar", "archive/zip", "bufio", "bytes", "cmp", "compress/bzip2",
    "compress/flate", "compress/gzip", "compress/lzw", "compress/zlib",
    "container/heap", "container/list", "container/ring", "context", "crypto",
    "crypto/aes", "crypto/cipher", "crypto/des", "crypto/dsa", "crypto/ecdh",
    "crypto/ecdsa", "crypto/ed25519", "crypto/elliptic", "crypto/hmac",
    "crypto/md5", "crypto/rand", "crypto/rc4", "crypto/rsa", "crypto/sha1",
    "crypto/sha256", "crypto/sha512", "crypto/subtle", "crypto/tls",
    "crypto/x509", "crypto/x509/pkix", "database/sql", "database/sql/driver",
    "debug/dwarf", "debug/elf", "debug/gosym", "debug/macho", "debug/pe",
    "embed", "encoding", "encoding/ascii85", "encoding/asn1", "encoding/base32",
    "encoding/base64", "encoding/binary", "encoding/csv", "encoding/gob",
    "encoding/hex", "encoding/json", "encoding/pem", "encoding/xml", "errors",
    "expvar", "flag", "fmt", "go/ast", "go/build", "go/constant", "go/doc",
    "go/format", "go/importer", "go/parser", "go/printer", "go/scanner",
    "go/token", "go/types", "hash", "hash/adler32", "hash/crc32", "hash/crc64",
    "hash/fnv", "hash/maphash", "html", "html/template", "image", "image/color",
    "image/draw", "image/gif", "image/jpeg", "image/png", "index/suffixarray",
    "io", "io/fs", "io/ioutil", "iter", "log", "log/slog", "log/syslog",
    "maps", "math", "math/big", "math/bits", "math/cmplx", "math/rand",
    "math/rand/v2", "mime", "mime/multipart", "mime/quotedprintable", "net",
    "net/http", "net/http/cookiejar", "net/http/httptest", "net/http/httptrace",
    "net/http/httputil", "net/http/pprof", "net/mail", "net/netip", "net/rpc",
    "net/rpc/jsonrpc", "net/smtp", "net/textproto", "net/url", "os",
    "os/exec", "os/signal", "os/user", "path", "path/filepath", "plugin",
    "reflect", "regexp", "regexp/syntax", "runtime", "runtime/debug",
    "runtime/pprof", "runtime/trace", "slices", "sort", "strconv", "strings",
    "sync", "sync/atomic", "syscall", "testing", "testing/fstest",
    "testing/quick", "text/scanner", "text/tabwriter", "text/template",
    "text/template/parse", "time", "unicode", "unicode/utf16", "unicode/utf8",
    "unique", "unsafe",
)


class PackageNameCache:
    """Maps a canonical package path to its package identifier.

    Insert-if-absent: the first writer wins and later writes for the same
    path are ignored.
    """

    def __init__(self, seed_stdlib: bool = True) -> None:
        self._names: Dict[str, str] = {}
        if seed_stdlib:
            for path in STDLIB_PACKAGES:
                self._names[path] = path.rsplit("/", 1)[-1]

    def get(self, package_path: str) -> Optional[str]:
        return self._names.get(package_path)

    def put(self, package_path: str, package_name: str) -> bool:
        """Record a mapping. Returns False when ignored."""
        if not package_path or not package_name:
            logger.debug(
                "Ignoring empty package mapping path=%r name=%r", package_path, package_name
            )
            return False
        if package_path in self._names:
            return False
        logger.debug("Mapped package path %s -> %s", package_path, package_name)
        self._names[package_path] = package_name
        return True

    def __contains__(self, package_path: object) -> bool:
        return package_path in self._names

    def __len__(self) -> int:
        return len(self._names)


class EntityTable:
    """All declarations of one analysis run keyed by (package path, name).

    The table only grows. Call :meth:`freeze` once type declarations have
    been collected; any later type insertion is a programming error. Free
    functions are kept apart and may still be added after the freeze, since
    they are discovered while resolving and nothing resolves against them.
    """

    def __init__(self) -> None:
        self._types: Dict[Tuple[str, str], Entity] = {}
        self._functions: Dict[Tuple[str, str], FunctionEntity] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def add(self, entity: Entity) -> Entity:
        """Insert `entity` unless its key exists; return the stored entity."""
        if isinstance(entity, FunctionEntity):
            store: Dict[Tuple[str, str], Entity] = self._functions  # type: ignore[assignment]
        else:
            if self._frozen:
                raise RuntimeError(
                    f"Entity table is frozen; cannot declare {entity.package_path}.{entity.name}"
                )
            store = self._types
        key = (entity.package_path, entity.name)
        existing = store.get(key)
        if existing is not None:
            logger.debug(
                "Duplicate declaration %s.%s in %s ignored",
                entity.package_path,
                entity.name,
                entity.location.file_path,
            )
            return existing
        store[key] = entity
        return entity

    def get(self, package_path: str, name: str) -> Optional[Entity]:
        return self._types.get((package_path, name))

    def find(self, kind: Type[_E], package_path: str, name: str) -> Optional[_E]:
        if kind is FunctionEntity:
            return self._functions.get((package_path, name))  # type: ignore[return-value]
        entity = self._types.get((package_path, name))
        return entity if isinstance(entity, kind) else None

    def find_struct(self, package_path: str, name: str) -> Optional[StructEntity]:
        return self.find(StructEntity, package_path, name)

    def find_interface(self, package_path: str, name: str) -> Optional[InterfaceEntity]:
        return self.find(InterfaceEntity, package_path, name)

    def find_alias(self, package_path: str, name: str) -> Optional[TypeAliasEntity]:
        return self.find(TypeAliasEntity, package_path, name)

    def find_type(self, package_path: str, name: str) -> Optional[StructEntity | InterfaceEntity]:
        """Return the struct or interface declared as `name` in the package."""
        entity = self._types.get((package_path, name))
        if isinstance(entity, (StructEntity, InterfaceEntity)):
            return entity
        return None

    def has_type(self, package_path: str, name: str) -> bool:
        return self.find_type(package_path, name) is not None

    def has_alias(self, package_path: str, name: str) -> bool:
        return self.find_alias(package_path, name) is not None

    def of_kind(self, kind: Type[_E]) -> List[_E]:
        """Entities of one variant in declaration order."""
        if kind is FunctionEntity:
            return list(self._functions.values())  # type: ignore[arg-type]
        return [entity for entity in self._types.values() if isinstance(entity, kind)]

    @property
    def structs(self) -> List[StructEntity]:
        return self.of_kind(StructEntity)

    @property
    def interfaces(self) -> List[InterfaceEntity]:
        return self.of_kind(InterfaceEntity)

    @property
    def functions(self) -> List[FunctionEntity]:
        return self.of_kind(FunctionEntity)

    @property
    def aliases(self) -> List[TypeAliasEntity]:
        return self.of_kind(TypeAliasEntity)

    def __iter__(self) -> Iterator[Entity]:
        yield from self._types.values()
        yield from self._functions.values()

    def __len__(self) -> int:
        return len(self._types) + len(self._functions)


__all__ = ["EntityTable", "PackageNameCache", "STDLIB_PACKAGES"]
