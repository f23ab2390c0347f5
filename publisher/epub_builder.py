"""EPUB archive serializer.

Packages a Book into an EPUB 2 container:

- mimetype (first entry, stored)
- META-INF/container.xml
- OEBPS/
    - content.opf (package document: metadata, manifest, spine)
    - toc.ncx (navigation)
    - Styles/style.css
    - Images/cover.png|jpg and Text/cover.xhtml (only with a decodable cover)
    - Text/chapter0.xhtml, ...

Output is a pure function of the Book: entries carry a fixed timestamp, so
the same Book always serializes to the same bytes.
"""

import html
import io
import logging
import zipfile
from dataclasses import dataclass, field
from typing import Optional

from models.book import Book, Chapter
from tools.image_utils import decode_data_uri
from tools.text_utils import split_into_paragraphs

logger = logging.getLogger(__name__)

MIMETYPE = "application/epub+zip"
OEBPS = "OEBPS"
XHTML_MEDIA_TYPE = "application/xhtml+xml"

# Earliest timestamp a zip entry can hold; keeps output byte-stable
_FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)

STYLESHEET = """body { font-family: serif; margin: 5%; line-height: 1.6; }
h1 { text-align: center; margin-bottom: 2em; page-break-before: always; }
p { margin-bottom: 1em; text-indent: 1.5em; }
img { max-width: 100%; height: auto; display: block; margin: 0 auto; }
.cover { width: 100%; height: 100%; object-fit: cover; }
"""

CONTAINER_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{OEBPS}/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""


@dataclass(frozen=True)
class ManifestItem:
    """A resource under OEBPS/, listed in the package manifest."""
    id: str
    href: str  # relative to OEBPS/
    media_type: str
    data: bytes


@dataclass(frozen=True)
class NavPoint:
    play_order: int
    label: str
    src: str


@dataclass
class EpubPackage:
    """Everything the archive will contain, before zipping."""
    title: str
    author: str
    identifier: str
    language: str
    items: list[ManifestItem] = field(default_factory=list)
    spine: list[str] = field(default_factory=list)  # manifest ids, reading order
    nav_points: list[NavPoint] = field(default_factory=list)
    cover_image_id: Optional[str] = None

    def item(self, item_id: str) -> ManifestItem:
        for it in self.items:
            if it.id == item_id:
                return it
        raise KeyError(item_id)


def _esc(text: str) -> str:
    return html.escape(text or "", quote=True)


def _chapter_id(index: int) -> str:
    return f"chap{index}"


def _chapter_href(index: int) -> str:
    return f"Text/chapter{index}.xhtml"


def render_chapter_xhtml(chapter: Chapter, language: str = "en") -> str:
    """One <h1> for the title, one <p> per non-empty line of prose."""
    paragraphs = "\n".join(f"  <p>{_esc(p)}</p>" for p in split_into_paragraphs(chapter.content))
    body = f"  <h1>{_esc(chapter.title)}</h1>\n{paragraphs}".rstrip()
    return f"""<?xml version="1.0" encoding="utf-8"?>
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" "http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">
<html xmlns="http://www.w3.org/1999/xhtml" xml:lang="{_esc(language)}">
<head>
  <title>{_esc(chapter.title)}</title>
  <link href="../Styles/style.css" rel="stylesheet" type="text/css"/>
</head>
<body>
{body}
</body>
</html>
"""


def render_cover_xhtml(image_href: str) -> str:
    return f"""<?xml version="1.0" encoding="utf-8"?>
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" "http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">
<html xmlns="http://www.w3.org/1999/xhtml">
<head>
  <title>Cover</title>
  <link href="../Styles/style.css" rel="stylesheet" type="text/css"/>
</head>
<body>
  <div style="text-align: center; padding: 0pt; margin: 0pt;">
    <img src="../{image_href}" class="cover" alt="Cover"/>
  </div>
</body>
</html>
"""


def render_opf(package: EpubPackage) -> str:
    """Generate OEBPS/content.opf."""
    items = "\n".join(
        f'    <item id="{it.id}" href="{it.href}" media-type="{it.media_type}"/>'
        for it in package.items
    )
    spine = "\n".join(f'    <itemref idref="{item_id}"/>' for item_id in package.spine)
    cover_meta = ""
    if package.cover_image_id:
        cover_meta = f'\n    <meta name="cover" content="{package.cover_image_id}"/>'
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" unique-identifier="BookId" version="2.0">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:opf="http://www.idpf.org/2007/opf">
    <dc:identifier id="BookId" opf:scheme="UUID">{_esc(package.identifier)}</dc:identifier>
    <dc:title>{_esc(package.title)}</dc:title>
    <dc:creator opf:role="aut">{_esc(package.author)}</dc:creator>
    <dc:language>{_esc(package.language)}</dc:language>{cover_meta}
  </metadata>
  <manifest>
{items}
  </manifest>
  <spine toc="ncx">
{spine}
  </spine>
</package>
"""


def render_ncx(package: EpubPackage) -> str:
    """Generate OEBPS/toc.ncx with one navPoint per chapter."""
    nav_points = "\n".join(
        f"""    <navPoint id="navPoint-{np.play_order}" playOrder="{np.play_order}">
      <navLabel><text>{_esc(np.label)}</text></navLabel>
      <content src="{np.src}"/>
    </navPoint>"""
        for np in package.nav_points
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <head>
    <meta name="dtb:uid" content="{_esc(package.identifier)}"/>
    <meta name="dtb:depth" content="1"/>
    <meta name="dtb:totalPageCount" content="0"/>
    <meta name="dtb:maxPageNumber" content="0"/>
  </head>
  <docTitle><text>{_esc(package.title)}</text></docTitle>
  <navMap>
{nav_points}
  </navMap>
</ncx>
"""


def plan_archive(book: Book, language: str = "en") -> EpubPackage:
    """Lay out manifest, spine and navigation for book without writing anything.

    A cover that does not decode is skipped. Chapters with empty prose are
    kept so the spine stays aligned with book.chapters.
    """
    package = EpubPackage(
        title=book.title,
        author=book.author,
        identifier=f"urn:uuid:{book.id}",
        language=language,
    )
    package.items.append(ManifestItem("style", "Styles/style.css", "text/css", STYLESHEET.encode("utf-8")))

    if book.cover_image:
        cover = decode_data_uri(book.cover_image)
        if cover is None:
            logger.warning("Cover image for '%s' could not be decoded; exporting without cover", book.title)
        else:
            image_href = f"Images/cover.{cover.extension}"
            package.items.append(ManifestItem("cover-image", image_href, cover.mime_type, cover.data))
            package.items.append(ManifestItem(
                "cover", "Text/cover.xhtml", XHTML_MEDIA_TYPE, render_cover_xhtml(image_href).encode("utf-8"),
            ))
            package.spine.append("cover")
            package.cover_image_id = "cover-image"

    for index, chapter in enumerate(book.chapters):
        item_id = _chapter_id(index)
        href = _chapter_href(index)
        package.items.append(ManifestItem(
            item_id, href, XHTML_MEDIA_TYPE, render_chapter_xhtml(chapter, language).encode("utf-8"),
        ))
        package.spine.append(item_id)
        package.nav_points.append(NavPoint(index + 1, chapter.title, href))

    # The NCX lists the finished nav points, so it is rendered last and listed first
    package.items.insert(0, ManifestItem(
        "ncx", "toc.ncx", "application/x-dtbncx+xml", render_ncx(package).encode("utf-8"),
    ))
    return package


def _zip_info(name: str, compress_type: int) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=_FIXED_DATE_TIME)
    info.compress_type = compress_type
    info.external_attr = 0o644 << 16
    return info


def serialize_archive(book: Book, language: str = "en") -> bytes:
    """Serialize book into EPUB bytes. Does not mutate book or touch the filesystem."""
    package = plan_archive(book, language)
    buffer = io.BytesIO()

    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as epub:
        # mimetype must be first and uncompressed
        epub.writestr(_zip_info("mimetype", zipfile.ZIP_STORED), MIMETYPE)
        epub.writestr(_zip_info("META-INF/container.xml", zipfile.ZIP_DEFLATED), CONTAINER_XML)
        epub.writestr(_zip_info(f"{OEBPS}/content.opf", zipfile.ZIP_DEFLATED), render_opf(package))
        for item in package.items:
            epub.writestr(_zip_info(f"{OEBPS}/{item.href}", zipfile.ZIP_DEFLATED), item.data)

    logger.info(
        "EPUB serialized: '%s', %d chapters, cover=%s, %d bytes",
        book.title, len(book.chapters), package.cover_image_id is not None, buffer.tell(),
    )
    return buffer.getvalue()
