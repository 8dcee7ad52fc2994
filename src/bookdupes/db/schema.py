# ABOUTME: SQL DDL statements for the bookdupes catalog database schema.
# ABOUTME: Defines libraries, library roots, books, book files, and their indexes.

SCHEMA_V1 = """
-- Named collections of books
CREATE TABLE libraries (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    name            TEXT NOT NULL UNIQUE,
    format_priority TEXT
);

-- Physical root directories of a library
CREATE TABLE library_paths (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    library_id INTEGER NOT NULL REFERENCES libraries(id) ON DELETE CASCADE,
    path       TEXT NOT NULL,
    UNIQUE (library_id, path)
);

-- Core book catalog table; a NULL title with no other metadata means "no metadata"
CREATE TABLE books (
    id                   INTEGER PRIMARY KEY AUTOINCREMENT,
    library_id           INTEGER NOT NULL REFERENCES libraries(id) ON DELETE CASCADE,
    library_path_id      INTEGER REFERENCES library_paths(id) ON DELETE SET NULL,
    title                TEXT,
    authors              TEXT,
    isbn13               TEXT,
    isbn10               TEXT,
    goodreads_id         TEXT,
    hardcover_id         TEXT,
    google_id            TEXT,
    asin                 TEXT,
    audible_id           TEXT,
    comicvine_id         TEXT,
    metadata_match_score REAL,
    date_added           TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE INDEX idx_books_library ON books(library_id);

-- Files attached to a book, in insertion order
CREATE TABLE book_files (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    book_id        INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    file_name      TEXT NOT NULL,
    file_sub_path  TEXT NOT NULL DEFAULT '',
    is_book_format INTEGER NOT NULL DEFAULT 1,
    book_type      TEXT,
    UNIQUE (book_id, file_sub_path, file_name)
);

CREATE INDEX idx_book_files_book ON book_files(book_id);
CREATE INDEX idx_book_files_location ON book_files(file_sub_path, file_name);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""
