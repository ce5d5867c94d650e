"""CLI script to seed subjects from a CSV file into the backend DB.
Usage: python scripts/import_subjects.py FILE [--delimiter ;]

The file needs a header row with `name` and `code` columns; any `id`
column is ignored because ids are assigned by the database.
"""
import sys
import argparse
import csv
import pathlib
from typing import List, Optional
# Ensure `backend/` is on sys.path so package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from grading_system.database import engine, create_db_and_tables
from grading_system.repositories import SubjectRepository
from grading_system.schemas import SubjectDTO
from grading_system.services import SubjectService


def read_subjects(path: pathlib.Path, delimiter: str = ';') -> List[SubjectDTO]:
    """Parse `path` into id-less `SubjectDTO`s, skipping blank rows."""
    with path.open(newline='', encoding='utf-8') as fh:
        reader = csv.DictReader(fh, delimiter=delimiter)
        if not reader.fieldnames or 'name' not in reader.fieldnames:
            raise ValueError(f'{path} has no "name" column')
        out = []
        for row in reader:
            name = (row.get('name') or '').strip()
            code = (row.get('code') or '').strip()
            if not name and not code:
                continue
            out.append(SubjectDTO(name=name or None, code=code or None))
        return out


def main(path: pathlib.Path, delimiter: str = ';', session: Optional[Session] = None) -> int:
    """Import every row of `path` and return the number of subjects created.

    Results are printed to stdout for a quick CLI feedback loop.
    """
    subjects = read_subjects(path, delimiter)
    if not subjects:
        print('No subjects found to import')
        return 0
    if session is None:
        create_db_and_tables()
        with Session(engine) as s:
            return _import(s, subjects)
    return _import(session, subjects)


def _import(session: Session, subjects: List[SubjectDTO]) -> int:
    svc = SubjectService(SubjectRepository(session))
    for dto in subjects:
        created = svc.save(dto)
        print(f'Imported {created}')
    print(f'Total created subjects: {len(subjects)}')
    return len(subjects)


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('file', type=pathlib.Path, help='CSV file with name/code columns')
    parser.add_argument('--delimiter', default=';', help='Column separator (default ";")')
    args = parser.parse_args()
    main(args.file, delimiter=args.delimiter)
