"""
VetClinic Backend — Patient Service Unit Tests
================================================

What:  PatientService against MemoryStore (and a mocked store where we need
       to prove that no lookup happens).

What we test:
    ✅ List is scoped to the caller and to active patients
    ✅ Malformed ids never reach the store
    ✅ Missing owner on create raises and writes nothing
    ✅ Update whitelist, not-found policy, hard delete
"""

from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from vetclinic.exceptions import NotFoundError, ValidationError
from vetclinic.schemas.patient import PatientCreate, PatientUpdate
from vetclinic.services.patient_service import PatientService
from vetclinic.store import PATIENTS, DocumentStore


async def _create(service, vet, body):
    created = await service.create_patient(vet, PatientCreate(**body))
    return created.id


class TestListPatients:

    @pytest.mark.asyncio
    async def test_returns_only_active_patients_of_caller(self, memory_store, vet_one, vet_two, patient_body):
        service = PatientService(memory_store)
        mine = await _create(service, vet_one, patient_body)
        retired = await _create(service, vet_one, {**patient_body, "nombre": "Toby"})
        await service.update_patient(retired, PatientUpdate(estado=False))
        await _create(service, vet_two, {**patient_body, "nombre": "Luna"})

        result = await service.list_patients(vet_one)

        assert [p.id for p in result] == [mine]
        assert result[0].veterinario.nombre == "Ana"
        assert result[0].veterinario.apellido == "Pérez"

    @pytest.mark.asyncio
    async def test_list_items_omit_discharge_date(self, memory_store, vet_one, patient_body):
        service = PatientService(memory_store)
        await _create(service, vet_one, patient_body)

        item = (await service.list_patients(vet_one))[0]

        assert "salida" not in item.model_dump()

    @pytest.mark.asyncio
    async def test_empty_for_veterinarian_without_patients(self, memory_store, vet_one, vet_two, patient_body):
        service = PatientService(memory_store)
        await _create(service, vet_one, patient_body)

        assert await service.list_patients(vet_two) == []


class TestMalformedIds:
    """Malformed identifiers are rejected before any store call."""

    @pytest.mark.parametrize("bad_id", ["not-an-id", "123", "zzzzzzzzzzzzzzzzzzzzzzzz", ""])
    @pytest.mark.asyncio
    async def test_no_lookup_attempted(self, bad_id):
        store = AsyncMock(spec=DocumentStore)
        service = PatientService(store)

        with pytest.raises(NotFoundError) as detail_exc:
            await service.get_patient(bad_id)
        with pytest.raises(NotFoundError):
            await service.update_patient(bad_id, PatientUpdate(nombre="Rex"))
        with pytest.raises(NotFoundError):
            await service.delete_patient(bad_id)

        assert bad_id in detail_exc.value.message
        store.find_by_id.assert_not_awaited()
        store.update_by_id.assert_not_awaited()
        store.delete_by_id.assert_not_awaited()


class TestCreatePatient:

    @pytest.mark.asyncio
    async def test_owner_is_authenticated_veterinarian(self, memory_store, vet_one, vet_two, patient_body):
        service = PatientService(memory_store, legacy_owner_from_body=False)

        patient_id = await _create(service, vet_one, {**patient_body, "id": str(vet_two["_id"])})

        stored = await memory_store.find_by_id(PATIENTS, ObjectId(patient_id))
        assert stored["veterinario"] == vet_one["_id"]
        assert stored["estado"] is True
        assert stored["createdAt"] == stored["updatedAt"]
        assert "id" not in stored

    @pytest.mark.asyncio
    async def test_legacy_flag_takes_owner_from_body(self, memory_store, vet_one, vet_two, patient_body):
        service = PatientService(memory_store, legacy_owner_from_body=True)

        patient_id = await _create(service, vet_one, {**patient_body, "id": str(vet_two["_id"])})

        stored = await memory_store.find_by_id(PATIENTS, ObjectId(patient_id))
        assert stored["veterinario"] == vet_two["_id"]

    @pytest.mark.asyncio
    async def test_legacy_flag_rejects_unknown_owner(self, memory_store, vet_one, patient_body):
        service = PatientService(memory_store, legacy_owner_from_body=True)

        with pytest.raises(ValidationError):
            await _create(service, vet_one, {**patient_body, "id": str(ObjectId())})
        assert await memory_store.find(PATIENTS, {}) == []

    @pytest.mark.asyncio
    async def test_deleted_veterinarian_is_rejected_without_write(self, memory_store, patient_body):
        service = PatientService(memory_store)
        ghost = {"_id": ObjectId(), "nombre": "Sin", "apellido": "Registro"}

        with pytest.raises(ValidationError, match="El veterinario no existe"):
            await _create(service, ghost, patient_body)

        assert await memory_store.find(PATIENTS, {}) == []

    @pytest.mark.asyncio
    async def test_returns_success_message(self, memory_store, vet_one, patient_body):
        service = PatientService(memory_store)

        result = await service.create_patient(vet_one, PatientCreate(**patient_body))

        assert result.message == "Registro exitoso del paciente"
        assert ObjectId.is_valid(result.id)


class TestGetPatient:

    @pytest.mark.asyncio
    async def test_round_trip_keeps_submitted_fields(self, memory_store, vet_one, patient_body):
        service = PatientService(memory_store)
        patient_id = await _create(service, vet_one, patient_body)

        detail = await service.get_patient(patient_id)

        dumped = detail.model_dump()
        for field, value in patient_body.items():
            assert dumped[field] == value
        assert detail.salida is not None
        assert detail.veterinario.id == str(vet_one["_id"])

    @pytest.mark.asyncio
    async def test_inactive_patient_still_visible(self, memory_store, vet_one, patient_body):
        service = PatientService(memory_store)
        patient_id = await _create(service, vet_one, patient_body)
        await service.update_patient(patient_id, PatientUpdate(estado=False))

        detail = await service.get_patient(patient_id)

        assert detail.estado is False

    @pytest.mark.asyncio
    async def test_absent_patient_raises_not_found(self, memory_store):
        service = PatientService(memory_store)

        with pytest.raises(NotFoundError):
            await service.get_patient(str(ObjectId()))


class TestUpdatePatient:

    @pytest.mark.asyncio
    async def test_applies_only_sent_fields(self, memory_store, vet_one, patient_body):
        service = PatientService(memory_store)
        patient_id = await _create(service, vet_one, patient_body)

        result = await service.update_patient(patient_id, PatientUpdate(sintomas="tos"))

        assert result.message == "Actualización exitosa del paciente"
        stored = await memory_store.find_by_id(PATIENTS, ObjectId(patient_id))
        assert stored["sintomas"] == "tos"
        assert stored["nombre"] == "Max"
        assert stored["updatedAt"] >= stored["createdAt"]

    @pytest.mark.asyncio
    async def test_absent_patient_raises_not_found(self, memory_store):
        service = PatientService(memory_store)

        with pytest.raises(NotFoundError):
            await service.update_patient(str(ObjectId()), PatientUpdate(nombre="Rex"))

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, memory_store, vet_one, patient_body):
        service = PatientService(memory_store)
        patient_id = await _create(service, vet_one, patient_body)

        with pytest.raises(ValidationError):
            await service.update_patient(patient_id, PatientUpdate())


class TestDeletePatient:

    @pytest.mark.asyncio
    async def test_hard_delete_then_not_found(self, memory_store, vet_one, patient_body):
        service = PatientService(memory_store)
        patient_id = await _create(service, vet_one, patient_body)

        await service.delete_patient(patient_id)

        assert await memory_store.find_by_id(PATIENTS, ObjectId(patient_id)) is None
        with pytest.raises(NotFoundError):
            await service.delete_patient(patient_id)
