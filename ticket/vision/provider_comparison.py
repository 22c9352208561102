"""
Provider Comparison - Runs every provider over sample tickets and measures field agreement

Usage:
    results = run_provider_comparison(registry, "tests/vision")
    analysis = compare_results(results)
"""
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Union

from ..models import FIELD_KEYS

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {'.jpg', '.jpeg', '.png', '.webp', '.gif', '.bmp'}


def find_test_images(images_dir: Union[str, Path]) -> List[Path]:
    images_dir = Path(images_dir)
    if not images_dir.is_dir():
        logger.warning(f"Test image directory not found: {images_dir}")
        return []
    return sorted(p for p in images_dir.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES)


def run_provider_comparison(registry, images_dir: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
    """
    Extract every test image with every registered provider.

    Returns:
        {provider name: {"connected": bool, "results": [...]} or {"connected": False, "error": str}}
    """
    images = find_test_images(images_dir)
    results = {}
    if not images:
        return results

    connectivity = registry.test_all_providers()
    for name in registry.get_all_provider_names():
        provider = registry.get_provider(name)
        if provider is None:
            continue
        if not connectivity.get(name):
            results[name] = {'connected': False, 'error': 'Failed connection test'}
            continue

        provider_results = []
        for image_path in images:
            result = provider.extract_ticket_data(str(image_path))
            provider_results.append({
                'imageName': image_path.name,
                'success': result.success,
                'data': result.fields.to_dict(),
                'error': result.error,
            })
        results[name] = {'connected': True, 'results': provider_results}
        logger.info(f"{name}: {sum(r['success'] for r in provider_results)}/{len(images)} images extracted")
    return results


def compare_results(results: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Per image and per field, the most common value across providers and how many agree.

    Comparison needs at least two connected providers; otherwise only counts are returned.
    """
    connected = {name: data for name, data in results.items() if data.get('connected')}
    analysis = {
        'providersCount': len(results),
        'connectedCount': len(connected),
        'imageComparisons': [],
    }
    if len(connected) < 2:
        return analysis

    image_names = []
    for data in connected.values():
        for result in data.get('results', []):
            if result['imageName'] not in image_names:
                image_names.append(result['imageName'])

    for image_name in image_names:
        provider_results = {}
        for name, data in connected.items():
            for result in data.get('results', []):
                if result['imageName'] == image_name and result['success']:
                    provider_results[name] = result['data']

        field_agreement = {}
        for field in FIELD_KEYS:
            values = Counter(
                data[field] for data in provider_results.values() if data.get(field) is not None)
            total = sum(values.values())
            value, count = values.most_common(1)[0] if values else (None, 0)
            field_agreement[field] = {
                'value': value,
                'agreement': f"{(count / total * 100) if total else 0:.1f}%",
                'providers': total,
            }

        analysis['imageComparisons'].append({
            'imageName': image_name,
            'providerResults': provider_results,
            'fieldAgreement': field_agreement,
        })
    return analysis
