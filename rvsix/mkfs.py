"""Build a file-system image holding a root directory and a set of files."""

from __future__ import annotations

import struct
import sys
from dataclasses import dataclass, field

from .memory import FSSIZE, LOGSIZE

BSIZE = 1024  # block size
FSMAGIC = 0x10203040
ROOTINO = 1  # root i-number
NDIRECT = 12
NINDIRECT = BSIZE // 4
MAXFILE = NDIRECT + NINDIRECT
DIRSIZ = 14

T_DIR = 1
T_FILE = 2
T_DEVICE = 3

NINODES = 200

_SUPERBLOCK = struct.Struct("<8I")
_DINODE = struct.Struct(f"<4hI{NDIRECT + 1}I")
_DIRENT = struct.Struct(f"<H{DIRSIZ}s")
_INDIRECT = struct.Struct(f"<{NINDIRECT}I")

IPB = BSIZE // _DINODE.size  # inodes per block

NBITMAP = FSSIZE // (BSIZE * 8) + 1
NINODEBLOCKS = NINODES // IPB + 1
NLOG = LOGSIZE
NMETA = 2 + NLOG + NINODEBLOCKS + NBITMAP  # boot, super, log, inodes, bitmap
NBLOCKS = FSSIZE - NMETA  # data blocks


@dataclass
class Superblock:
    """On-disk layout description stored in block 1."""

    magic: int
    size: int
    nblocks: int
    ninodes: int
    nlog: int
    logstart: int
    inodestart: int
    bmapstart: int

    def _pack(self):
        return _SUPERBLOCK.pack(
            self.magic, self.size, self.nblocks, self.ninodes,
            self.nlog, self.logstart, self.inodestart, self.bmapstart,
        )


@dataclass
class DiskInode:
    """An inode as stored in an inode block."""

    type: int = 0
    major: int = 0
    minor: int = 0
    nlink: int = 0
    size: int = 0
    addrs: list = field(default_factory=lambda: [0] * (NDIRECT + 1))

    def _pack(self):
        return _DINODE.pack(self.type, self.major, self.minor, self.nlink, self.size, *self.addrs)

    @classmethod
    def _unpack(cls, data):
        values = _DINODE.unpack(data)
        return cls(*values[:5], addrs=list(values[5:]))


class ImageBuilder:
    """Lays out a fresh, zeroed image in a seekable binary file object."""

    def __init__(self, image):
        self.image = image
        self.superblock = Superblock(
            magic=FSMAGIC,
            size=FSSIZE,
            nblocks=NBLOCKS,
            ninodes=NINODES,
            nlog=NLOG,
            logstart=2,
            inodestart=2 + NLOG,
            bmapstart=2 + NLOG + NINODEBLOCKS,
        )
        self.free_inode = 1
        self.free_block = NMETA  # first block that may be handed out
        image.seek(0)
        image.write(bytes(FSSIZE * BSIZE))
        image.truncate()
        self._wsect(1, self.superblock._pack().ljust(BSIZE, b"\0"))

    def _wsect(self, sec, data):
        self.image.seek(sec * BSIZE)
        if self.image.write(bytes(data)) != BSIZE:
            raise OSError("write")

    def _rsect(self, sec):
        self.image.seek(sec * BSIZE)
        data = self.image.read(BSIZE)
        if len(data) != BSIZE:
            raise OSError("read")
        return data

    def _iblock(self, inum):
        return inum // IPB + self.superblock.inodestart

    def _take_block(self):
        if self.free_block >= FSSIZE:
            raise ValueError("out of blocks")
        block = self.free_block
        self.free_block += 1
        return block

    def alloc_inode(self, itype):
        """Allocate the next inode with type ``itype``; return its number."""
        inum = self.free_inode
        self.free_inode += 1
        self.write_inode(inum, DiskInode(type=itype, nlink=1, size=0))
        return inum

    def read_inode(self, inum):
        block = self._rsect(self._iblock(inum))
        off = (inum % IPB) * _DINODE.size
        return DiskInode._unpack(block[off:off + _DINODE.size])

    def write_inode(self, inum, inode):
        bn = self._iblock(inum)
        block = bytearray(self._rsect(bn))
        off = (inum % IPB) * _DINODE.size
        block[off:off + _DINODE.size] = inode._pack()
        self._wsect(bn, block)

    def append(self, inum, data):
        """Append ``data`` to the end of inode ``inum``, allocating blocks as needed."""
        data = memoryview(bytes(data))
        din = self.read_inode(inum)
        off = din.size
        pos = 0
        while pos < len(data):
            fbn = off // BSIZE
            if fbn >= MAXFILE:
                raise ValueError("file too large")
            if fbn < NDIRECT:
                if din.addrs[fbn] == 0:
                    din.addrs[fbn] = self._take_block()
                x = din.addrs[fbn]
            else:
                if din.addrs[NDIRECT] == 0:
                    din.addrs[NDIRECT] = self._take_block()
                indirect = list(_INDIRECT.unpack(self._rsect(din.addrs[NDIRECT])))
                if indirect[fbn - NDIRECT] == 0:
                    indirect[fbn - NDIRECT] = self._take_block()
                    self._wsect(din.addrs[NDIRECT], _INDIRECT.pack(*indirect))
                x = indirect[fbn - NDIRECT]
            n1 = min(len(data) - pos, (fbn + 1) * BSIZE - off)
            block = bytearray(self._rsect(x))
            start = off - fbn * BSIZE
            block[start:start + n1] = data[pos:pos + n1]
            self._wsect(x, block)
            pos += n1
            off += n1
        din.size = off
        self.write_inode(inum, din)

    def _link(self, dir_inum, inum, name):
        entry = _DIRENT.pack(inum, name.encode("utf-8")[:DIRSIZ])
        self.append(dir_inum, entry)

    def write_bitmap(self, used):
        """Mark the first ``used`` blocks as allocated in the bitmap block."""
        if used >= BSIZE * 8:
            raise ValueError("bitmap cannot describe that many blocks")
        bitmap = bytearray(BSIZE)
        for i in range(used):
            bitmap[i // 8] |= 1 << (i % 8)
        self._wsect(self.superblock.bmapstart, bitmap)


def make_image(path, files):
    """Create the image at ``path`` holding ``files`` in its root directory."""
    with open(path, "w+b") as image:
        builder = ImageBuilder(image)
        rootino = builder.alloc_inode(T_DIR)
        if rootino != ROOTINO:
            raise RuntimeError("root inode is not the first inode")
        builder._link(rootino, rootino, ".")
        builder._link(rootino, rootino, "..")

        for name in files:
            shortname = name[5:] if name.startswith("user/") else name
            if "/" in shortname:
                raise ValueError(f"{name}: file name must not contain '/'")
            with open(name, "rb") as f:
                # Binaries are stored as _name on the host to keep them apart
                # from the host's own programs.
                if shortname.startswith("_"):
                    shortname = shortname[1:]
                inum = builder.alloc_inode(T_FILE)
                builder._link(rootino, inum, shortname)
                while chunk := f.read(BSIZE):
                    builder.append(inum, chunk)

        root = builder.read_inode(rootino)
        root.size = (root.size // BSIZE + 1) * BSIZE
        builder.write_inode(rootino, root)
        builder.write_bitmap(builder.free_block)
    return builder


def main(argv=None):
    """Build an image from the command line; return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("Usage: mkfs fs.img files...\n")
        return 1
    print(
        f"nmeta {NMETA} (boot, super, log blocks {NLOG} inode blocks {NINODEBLOCKS}, "
        f"bitmap blocks {NBITMAP}) blocks {NBLOCKS} total {FSSIZE}"
    )
    try:
        builder = make_image(args[0], args[1:])
    except OSError as exc:
        sys.stderr.write(f"{exc.filename or args[0]}: {exc.strerror or exc}\n")
        return 1
    except ValueError as exc:
        sys.stderr.write(f"mkfs: {exc}\n")
        return 1
    print(f"balloc: first {builder.free_block} blocks have been allocated")
    print(f"balloc: write bitmap block at sector {builder.superblock.bmapstart}")
    return 0