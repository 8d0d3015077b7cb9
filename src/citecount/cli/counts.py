"""Citation count commands: list providers, retrieve counts, show stored counts."""

import json
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from citecount.config import CitecountSettings
from citecount.counts import CitationCountResolver, HttpTransport, ResponseValidator
from citecount.counts.autoretrieve import AutoRetrieveHook
from citecount.counts.batch_processor import CitationCountBatchProcessor
from citecount.counts.extra_field import get_citation_count
from citecount.counts.providers import PROVIDER_KEYS, get_provider, list_providers
from citecount.errors import RecordStoreError
from citecount.services.localization import Localizer
from citecount.services.preferences import SettingsPreferenceStore
from citecount.services.progress import LoggingProgressReporter
from citecount.services.record_store import JsonRecordStore
from citecount.utilities.schemas import BibliographicRecord


def run_providers(args, settings: CitecountSettings) -> None:
    """
    Print every provider key with its name and identifier kinds.
    """
    preferences = SettingsPreferenceStore(settings)
    for provider in list_providers(preferences):
        kinds = ', '.join(kind.label for kind in provider.supported_kinds)
        note = ' (API key required)' if provider.credential_preference else ''
        print(f'{provider.key:<16} {provider.name:<18} {kinds}{note}')


def _progress_reporter(localizer: Localizer, provider_name: str) -> LoggingProgressReporter:
    args = {'provider': provider_name}
    return LoggingProgressReporter(
        localizer.format('citationcounts-progress-headline', args),
        localizer.format('citationcounts-progress-finished-headline', args),
    )


def _build_processor(
    settings: CitecountSettings,
    store: JsonRecordStore,
    transport: HttpTransport,
    provider_name: str,
) -> CitationCountBatchProcessor:
    validator = ResponseValidator(transport, SettingsPreferenceStore(settings))
    localizer = Localizer()
    return CitationCountBatchProcessor(
        resolver=CitationCountResolver(validator),
        store=store,
        progress=_progress_reporter(localizer, provider_name),
        localizer=localizer,
    )


async def run_retrieve(args, settings: CitecountSettings) -> None:
    """
    Resolve citation counts for records in a JSON file and write them back.
    """
    preferences = SettingsPreferenceStore(settings)
    provider = get_provider(args.provider, preferences)
    store = JsonRecordStore(args.records)

    records = list(store.records.values())
    if args.keys:
        wanted = set(args.keys)
        records = [record for record in records if record.key in wanted]
        missing = wanted - {record.key for record in records}
        if missing:
            logger.warning(f'Unknown record keys: {", ".join(sorted(missing))}')

    async with HttpTransport(settings=settings) as transport:
        processor = _build_processor(settings, store, transport, provider.name)
        stats = await processor.run(records, provider)

    print(json.dumps(stats.to_dict(), indent=2))


def _load_new_records(path: Path) -> list[BibliographicRecord]:
    try:
        raw = json.loads(path.read_text(encoding='utf-8'))
        return [BibliographicRecord.model_validate(item) for item in raw]
    except (OSError, json.JSONDecodeError, TypeError, ValidationError) as e:
        raise RecordStoreError(
            'RECORDS_INVALID', f'Could not read records from {path}: {e}'
        ) from e


async def run_add(args, settings: CitecountSettings) -> None:
    """
    Add records to a JSON record file, then auto-retrieve their counts if the
    ``autoretrieve`` setting names a provider.
    """
    store = JsonRecordStore(args.records)
    new_records = _load_new_records(Path(args.new))
    added = []
    for record in new_records:
        if record.key in store.records:
            logger.warning(f'Skipping record {record.key}: key already exists in {args.records}')
            continue
        store.add(record)
        added.append(record)
    logger.info(f'Added {len(added)} of {len(new_records)} records to {args.records}')

    provider_name = (
        get_provider(settings.autoretrieve).name
        if settings.autoretrieve in PROVIDER_KEYS
        else settings.autoretrieve
    )
    async with HttpTransport(settings=settings) as transport:
        processor = _build_processor(settings, store, transport, provider_name)
        hook = AutoRetrieveHook(processor, SettingsPreferenceStore(settings))
        stats = await hook.on_records_added(added)

    if stats is not None:
        print(json.dumps(stats.to_dict(), indent=2))


def run_show(args, settings: CitecountSettings) -> None:
    """
    Print the stored citation count of every record.
    """
    store = JsonRecordStore(args.records)
    for record in store.records.values():
        count = get_citation_count(store.get_field(record, 'extra'))
        print(f'{count:>8}  {record.key}  {record.display_label[:70]}')


def configure_subparser(subparsers):
    """Configure the subparser for citation count commands."""
    providers_parser = subparsers.add_parser(
        'providers', help='List the available citation count providers'
    )
    providers_parser.set_defaults(func=run_providers)

    retrieve_parser = subparsers.add_parser(
        'retrieve', help='Retrieve citation counts for records in a JSON file'
    )
    retrieve_parser.add_argument(
        '--provider',
        choices=PROVIDER_KEYS,
        required=True,
        help='Provider to query',
    )
    retrieve_parser.add_argument(
        '--records', type=str, required=True, help='Path to the JSON record file'
    )
    retrieve_parser.add_argument(
        '--key',
        dest='keys',
        action='append',
        help='Only process the record with this key (repeatable)',
    )
    retrieve_parser.set_defaults(func=run_retrieve)

    add_parser = subparsers.add_parser(
        'add',
        help='Add records to a JSON file and auto-retrieve their citation counts',
    )
    add_parser.add_argument(
        '--records', type=str, required=True, help='Path to the JSON record file'
    )
    add_parser.add_argument(
        '--new', type=str, required=True, help='JSON file with the records to add'
    )
    add_parser.set_defaults(func=run_add)

    show_parser = subparsers.add_parser(
        'show', help='Show the stored citation count of each record'
    )
    show_parser.add_argument(
        '--records', type=str, required=True, help='Path to the JSON record file'
    )
    show_parser.set_defaults(func=run_show)
