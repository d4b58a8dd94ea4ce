from application.dtos.customer_dtos import CustomerResponse
from domain.aggregates.customer import Customer


class CustomerMapper:
    @staticmethod
    def to_customer_response(customer: Customer) -> CustomerResponse:
        """Map a Customer entity to a CustomerResponse DTO.

        Args:
            customer: The persisted Customer entity to map

        Returns:
            CustomerResponse: The mapped response DTO

        """
        return CustomerResponse(
            id=customer.id,
            name=customer.name,
            email=customer.email,
            age=customer.age,
            gender=customer.gender,
            profile_image_id=customer.profile_image_id,
        )
